#------------------------------------------------------------
#                   aggregation_service.py
#       Builds global and per-repository summaries from
#                  the notable stargazers.

from typing import Dict, Iterable, List
from ..config import (
    REPO_TOP_COMPANIES_LIMIT,
    REPO_TOP_STARGAZERS_LIMIT,
    TOP_COMPANIES_LIMIT,
    TOP_STARGAZERS_LIMIT,
)
from ..models import CompanyCount, NotableStargazer, RepoStargazerStats, StargazerIntelligence

# Ties are broken by login so output order depends only on the data.
def rank_stargazers(stargazers: Iterable[NotableStargazer]) -> List[NotableStargazer]:
    return sorted(stargazers, key=lambda item: (-item.score, item.login))

# This function does count notable stargazers per company.
# Stargazers without a company are ignored.
def aggregate_companies(stargazers: Iterable[NotableStargazer]) -> List[CompanyCount]:
    counts: Dict[str, int] = {}
    for stargazer in stargazers:
        if stargazer.company:
            counts[stargazer.company] = counts.get(stargazer.company, 0) + 1

    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [CompanyCount(name=name, count=count) for name, count in ranked]

# This function does summarize the legends who starred one repository.
# ranked must already be sorted by rank_stargazers.
def build_repo_stats(repo: str, total_count: int, ranked: List[NotableStargazer]) -> RepoStargazerStats:
    repo_stargazers = [stargazer for stargazer in ranked if repo in stargazer.repos_starred]
    return RepoStargazerStats(
        total_count=total_count,
        notable_count=len(repo_stargazers),
        top_stargazers=repo_stargazers[:REPO_TOP_STARGAZERS_LIMIT],
        top_companies=[
            company.name for company in aggregate_companies(repo_stargazers)[:REPO_TOP_COMPANIES_LIMIT]
        ],
    )

# This function does assemble the final intelligence snapshot.
# Combined reach counts every legend, not only the retained top list.
def build_intelligence(
    stargazers_by_repo: Dict[str, List[str]],
    total_unique_stargazers: int,
    legends: Iterable[NotableStargazer],
    last_updated: str,
) -> StargazerIntelligence:
    ranked = rank_stargazers(legends)
    by_repo = {
        repo: build_repo_stats(repo, len(logins), ranked)
        for repo, logins in stargazers_by_repo.items()
    }
    return StargazerIntelligence(
        total_unique_stargazers=total_unique_stargazers,
        combined_reach=sum(stargazer.followers for stargazer in ranked),
        top_stargazers=ranked[:TOP_STARGAZERS_LIMIT],
        top_companies=aggregate_companies(ranked)[:TOP_COMPANIES_LIMIT],
        by_repo=by_repo,
        last_updated=last_updated,
    )
