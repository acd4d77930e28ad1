#------------------------------------------------------------
#                        controller.py
#         Coordinates the stargazer crawl, enrichment,
#              scoring and artifact persistence.

import os
import sys
import time
from typing import Callable, Dict, List, Optional
from .config import (
    ENV_CACHE_PATH,
    ENV_GITHUB_TOKEN,
    ENV_GITHUB_USERNAME,
    ENV_OUTPUT_PATH,
    DEFAULT_CACHE_PATH,
    DEFAULT_GITHUB_USERNAME,
    DEFAULT_OUTPUT_PATH,
    LEGEND_FOLLOWERS_THRESHOLD,
    LEGEND_STARS_THRESHOLD,
    MISSING_TOKEN_MESSAGE,
    USAGE_MESSAGE,
    load_repos_to_analyze,
    resolve_path,
)
from .errors import AuthMissingError
from .models import NotableStargazer, PipelineConfig, StargazerIntelligence, UserProfile
from .services.aggregation_service import build_intelligence
from .services.cache_service import CacheStore, load_cache, save_cache
from .services.enrichment_service import UserEnricher
from .services.github_service import GitHubService
from .services.identity_service import resolve_identities
from .services.intelligence_service import (
    describe_age,
    format_timestamp,
    is_data_stale,
    load_intelligence,
    write_intelligence,
)
from .services.scoring_service import build_notable
from .services.stargazer_service import StargazerFetcher
from .views.summary_view import render_summary

ANALYZING_MESSAGE = "Analyzing stargazers for {count} repos owned by {owner}..."
THRESHOLDS_MESSAGE = "Legend thresholds: {followers}+ followers OR {stars}+ total stars"
PREVIOUS_RUN_MESSAGE = "Previous intelligence generated {age}{stale}"
STALE_SUFFIX = " (stale)"
UNIQUE_STARGAZERS_MESSAGE = "Found {count} unique stargazers across all repos"
NOTABLE_STARGAZERS_MESSAGE = "Found {count} notable stargazers"
WROTE_OUTPUT_MESSAGE = "Wrote results to {path}"
OUTPUT_WRITE_ERROR = "ERROR: could not write intelligence to {path}: {error}"

# This function does build the run configuration from the environment.
def build_config() -> PipelineConfig:
    return PipelineConfig(
        github_token=os.environ.get(ENV_GITHUB_TOKEN, "").strip(),
        github_username=os.environ.get(ENV_GITHUB_USERNAME, "").strip() or DEFAULT_GITHUB_USERNAME,
        repos=load_repos_to_analyze(),
        cache_path=resolve_path(ENV_CACHE_PATH, DEFAULT_CACHE_PATH),
        output_path=resolve_path(ENV_OUTPUT_PATH, DEFAULT_OUTPUT_PATH),
    )

# This function does pick the artifact timestamp from the data itself.
# It is the newest fetch time among the cache entries used in this run,
# so an unchanged warm cache reproduces the same artifact.
def _data_timestamp(
    cache: CacheStore,
    config: PipelineConfig,
    repos: List[str],
    profiles: Dict[str, UserProfile],
    clock: Callable[[], float],
) -> str:
    fetched = []
    for repo in repos:
        entry = cache.repo_entry(config.repo_id(repo))
        if entry:
            fetched.append(entry.fetched_at)
    for login in profiles:
        entry = cache.user_entry(login)
        if entry:
            fetched.append(entry.fetched_at)
    return format_timestamp(max(fetched) if fetched else int(clock() * 1000))

def _report_previous_run(path: str) -> None:
    previous = load_intelligence(path)
    if previous is None:
        return
    last_updated = previous["lastUpdated"]
    print(PREVIOUS_RUN_MESSAGE.format(
        age=describe_age(last_updated),
        stale=STALE_SUFFIX if is_data_stale(last_updated) else "",
    ))

# This function does execute the full analysis end-to-end.
# The token is checked before any cache or network access; the artifact
# is only written once aggregation has finished.
def run_analysis(
    config: PipelineConfig,
    github_service: Optional[GitHubService] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.time,
) -> StargazerIntelligence:
    if not config.github_token:
        raise AuthMissingError(MISSING_TOKEN_MESSAGE)

    _report_previous_run(config.output_path)
    cache = load_cache(config.cache_path, clock=clock)
    github_service = github_service or GitHubService(config)

    print(ANALYZING_MESSAGE.format(count=len(config.repos), owner=config.github_username))
    print(THRESHOLDS_MESSAGE.format(followers=LEGEND_FOLLOWERS_THRESHOLD, stars=LEGEND_STARS_THRESHOLD))

    fetcher = StargazerFetcher(config, github_service, cache, sleep=sleep)
    stargazers_by_repo = fetcher.fetch_all(config.repos)

    index = resolve_identities(stargazers_by_repo)
    print(UNIQUE_STARGAZERS_MESSAGE.format(count=len(index)))

    enricher = UserEnricher(
        config,
        github_service,
        cache,
        flush=lambda: save_cache(cache, config.cache_path),
        sleep=sleep,
    )
    profiles = enricher.enrich(index.unique_logins)

    legends: List[NotableStargazer] = []
    for login, profile in profiles.items():
        notable = build_notable(profile, index.repos_by_login.get(login, []))
        if notable is not None:
            legends.append(notable)
    print(NOTABLE_STARGAZERS_MESSAGE.format(count=len(legends)))

    intelligence = build_intelligence(
        stargazers_by_repo,
        len(index),
        legends,
        _data_timestamp(cache, config, config.repos, profiles, clock),
    )

    write_intelligence(intelligence, config.output_path)
    print(WROTE_OUTPUT_MESSAGE.format(path=config.output_path))
    save_cache(cache, config.cache_path)

    print()
    print(render_summary(intelligence, len(legends)))
    return intelligence

def main() -> int:
    config = build_config()
    try:
        run_analysis(config)
    except AuthMissingError as exc:
        print(exc, file=sys.stderr)
        print(USAGE_MESSAGE, file=sys.stderr)
        return 1
    except OSError as exc:
        print(OUTPUT_WRITE_ERROR.format(path=config.output_path, error=exc), file=sys.stderr)
        return 1
    return 0
