#------------------------------------------------------------
#                    stargazer_service.py
#        Fetches and caches the stargazer list of each
#                  configured repository.

import sys
import time
from typing import Callable, Dict, List
from ..config import GITHUB_STARGAZERS_PER_PAGE
from ..errors import UpstreamError
from ..models import PipelineConfig
from .cache_service import CacheStore
from .github_service import GitHubService
from .retry_service import call_with_retry

CACHED_STARGAZERS_MESSAGE = "Using cached stargazers for {repo}"
FETCHING_STARGAZERS_MESSAGE = "Fetching stargazers for {repo}..."
MAX_STARGAZERS_MESSAGE = "Reached max users limit for {repo}"
FOUND_STARGAZERS_MESSAGE = "Found {count} stargazers for {repo}"
STARGAZERS_ERROR_TEMPLATE = "ERROR: fetching stargazers for {repo} failed: {error}"

class StargazerFetcher:

    def __init__(
        self,
        config: PipelineConfig,
        github_service: GitHubService,
        cache: CacheStore,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.github_service = github_service
        self.cache = cache
        self.sleep = sleep

    # This function does return the stargazer logins of one repository.
    # It serves fresh cache hits and otherwise pages the API up to the cap.
    # A failed fetch yields an empty list and is not cached.
    def fetch_repo_stargazers(self, repo: str) -> List[str]:
        repo_id = self.config.repo_id(repo)
        cached = self.cache.get_repo(repo_id)
        if cached is not None:
            print(CACHED_STARGAZERS_MESSAGE.format(repo=repo))
            return cached

        print(FETCHING_STARGAZERS_MESSAGE.format(repo=repo))
        cap = self.config.max_stargazers_per_repo
        stargazers: List[str] = []
        page = 1
        try:
            while True:
                logins = call_with_retry(
                    lambda: self.github_service.fetch_stargazer_page(repo_id, page),
                    attempts=self.config.max_attempts,
                    delay=self.config.rate_limit_delay,
                    sleep=self.sleep,
                    label=repo,
                )
                stargazers.extend(logins)
                if len(stargazers) >= cap:
                    print(MAX_STARGAZERS_MESSAGE.format(repo=repo))
                    del stargazers[cap:]
                    break
                if len(logins) < GITHUB_STARGAZERS_PER_PAGE:
                    break
                page += 1
        except UpstreamError as exc:
            print(STARGAZERS_ERROR_TEMPLATE.format(repo=repo, error=exc), file=sys.stderr)
            return []

        self.cache.put_repo(repo_id, stargazers)
        print(FOUND_STARGAZERS_MESSAGE.format(count=len(stargazers), repo=repo))
        return stargazers

    # This function does fetch every configured repository in order.
    # A fixed delay follows each repository to pace upstream usage.
    def fetch_all(self, repos: List[str]) -> Dict[str, List[str]]:
        stargazers_by_repo: Dict[str, List[str]] = {}
        for repo in repos:
            stargazers_by_repo[repo] = self.fetch_repo_stargazers(repo)
            self.sleep(self.config.repo_delay)
        return stargazers_by_repo
