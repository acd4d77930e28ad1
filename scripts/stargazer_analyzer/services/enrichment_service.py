#------------------------------------------------------------
#                   enrichment_service.py
#       Fetches profile data and owned-star totals for
#         stargazers in bounded concurrent batches.

import sys
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Dict, List, Optional
from ..errors import NotFoundError, RateLimitedError, UpstreamError
from ..models import PipelineConfig, UserProfile
from .cache_service import CacheStore
from .github_service import GitHubService
from .retry_service import call_with_retry

PROCESSING_USERS_MESSAGE = "Processing {count} users ({cached} cached, {pending} to fetch)..."
BATCH_PROGRESS_MESSAGE = "Processing batch {batch}/{total} ({percent}%)"
USER_NOT_FOUND_MESSAGE = "Skipping {login}: user not found"
USER_RATE_LIMITED_TEMPLATE = "WARNING: skipping {login}: still rate limited after {attempts} attempts"
USER_ERROR_TEMPLATE = "ERROR: fetching user {login} failed: {error}"
USERS_LIMIT_MESSAGE = "Limiting enrichment to the first {limit} of {count} users"

class UserEnricher:

    def __init__(
        self,
        config: PipelineConfig,
        github_service: GitHubService,
        cache: CacheStore,
        flush: Callable[[], object] = lambda: None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.github_service = github_service
        self.cache = cache
        self.flush = flush
        self.sleep = sleep

    def _with_retry(self, fn: Callable, login: str):
        return call_with_retry(
            fn,
            attempts=self.config.max_attempts,
            delay=self.config.rate_limit_delay,
            sleep=self.sleep,
            label=login,
        )

    def _submit(self, executor: ThreadPoolExecutor, login: str) -> Dict[str, Future]:
        return {
            "user": executor.submit(self._with_retry, lambda: self.github_service.fetch_user(login), login),
            "stars": executor.submit(self._with_retry, lambda: self.github_service.fetch_owned_stars(login), login),
        }

    # This function does turn the two fetches for a login into a profile.
    # Upstream failures skip the user and are reported, never raised.
    def _collect(self, login: str, futures: Dict[str, Future]) -> Optional[UserProfile]:
        try:
            user_payload = futures["user"].result()
            total_stars = futures["stars"].result()
            return UserProfile.from_api(user_payload, total_stars)
        except NotFoundError:
            print(USER_NOT_FOUND_MESSAGE.format(login=login))
        except RateLimitedError:
            print(USER_RATE_LIMITED_TEMPLATE.format(login=login, attempts=self.config.max_attempts), file=sys.stderr)
        except UpstreamError as exc:
            print(USER_ERROR_TEMPLATE.format(login=login, error=exc), file=sys.stderr)
        return None

    # This function does enrich logins with profile data.
    # Cache hits are reused; misses are fetched batch by batch, cached as
    # soon as they resolve, and the cache is flushed every few batches.
    def enrich(self, logins: List[str]) -> Dict[str, UserProfile]:
        if len(logins) > self.config.max_users:
            print(USERS_LIMIT_MESSAGE.format(limit=self.config.max_users, count=len(logins)))
            logins = logins[: self.config.max_users]

        profiles: Dict[str, UserProfile] = {}
        pending: List[str] = []
        for login in logins:
            cached = self.cache.get_user(login)
            if cached is not None:
                profiles[login] = cached
            else:
                pending.append(login)

        print(PROCESSING_USERS_MESSAGE.format(count=len(logins), cached=len(profiles), pending=len(pending)))
        if not pending:
            return profiles

        batch_size = max(1, self.config.batch_size)
        batches = [pending[start:start + batch_size] for start in range(0, len(pending), batch_size)]

        with ThreadPoolExecutor(max_workers=batch_size * 2) as executor:
            for number, batch in enumerate(batches, start=1):
                print(BATCH_PROGRESS_MESSAGE.format(
                    batch=number,
                    total=len(batches),
                    percent=round((number - 1) * 100 / len(batches)),
                ))
                in_flight = [(login, self._submit(executor, login)) for login in batch]
                for login, futures in in_flight:
                    profile = self._collect(login, futures)
                    if profile is None:
                        continue
                    self.cache.put_user(login, profile)
                    profiles[login] = profile

                if self.config.flush_every_batches > 0 and number % self.config.flush_every_batches == 0:
                    self.flush()
                if number < len(batches):
                    self.sleep(self.config.batch_delay)

        return profiles
