#------------------------------------------------------------
#                      github_service.py
#               Handles GitHub API requests and
#               classifies failed responses.

from typing import Any, Dict, List, Optional
import requests
from ..config import (
    GITHUB_API_ACCEPT_HEADER,
    GITHUB_API_BASE_URL,
    GITHUB_REQUEST_TIMEOUT_SECONDS,
    GITHUB_STARGAZERS_PER_PAGE,
    GITHUB_USER_REPOS_PER_PAGE,
)
from ..errors import (
    MalformedResponseError,
    NotFoundError,
    RateLimitedError,
    TransientUpstreamError,
)
from ..models import PipelineConfig, parse_stargazer_logins, sum_owned_stars

STARGAZERS_ENDPOINT_TEMPLATE = "/repos/{repo_id}/stargazers"
USER_ENDPOINT_TEMPLATE = "/users/{login}"
USER_REPOS_ENDPOINT_TEMPLATE = "/users/{login}/repos"

RATE_LIMIT_STATUS_CODES = (403, 429)
RATE_LIMIT_REMAINING_HEADER = "X-RateLimit-Remaining"
RETRY_AFTER_HEADER = "Retry-After"
RATE_LIMIT_TEXT = "rate limit"

REQUEST_FAILED_TEMPLATE = "GET {path} failed: {error}"
STATUS_FAILED_TEMPLATE = "GET {path} returned HTTP {status}"
INVALID_JSON_TEMPLATE = "GET {path} returned a body that is not JSON"

class GitHubService:

    # This function does initialize service state.
    # Requests go through the requests module unless a client is injected;
    # worker threads share it, so no Session state is kept between calls.
    def __init__(self, config: PipelineConfig, session: Optional[Any] = None):
        self.config = config
        self.session = session or requests

    # This function does build request headers for GitHub API calls.
    # It adds auth headers when a token is configured.
    def headers(self) -> Dict[str, str]:
        headers = {"Accept": GITHUB_API_ACCEPT_HEADER}
        if self.config.github_token:
            headers["Authorization"] = f"Bearer {self.config.github_token}"
        return headers

    # This function does issue a GET request and decode its JSON body.
    # Failures are raised as RateLimited, NotFound or TransientUpstream errors.
    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{GITHUB_API_BASE_URL}{path}"
        try:
            response = self.session.get(
                url,
                headers=self.headers(),
                params=params,
                timeout=GITHUB_REQUEST_TIMEOUT_SECONDS,
            )
        except requests.RequestException as exc:
            raise TransientUpstreamError(REQUEST_FAILED_TEMPLATE.format(path=path, error=exc)) from exc

        status = response.status_code
        if self._is_rate_limited(response):
            raise RateLimitedError(STATUS_FAILED_TEMPLATE.format(path=path, status=status), status)
        if status == 404:
            raise NotFoundError(STATUS_FAILED_TEMPLATE.format(path=path, status=status), status)
        if not 200 <= status < 300:
            raise TransientUpstreamError(STATUS_FAILED_TEMPLATE.format(path=path, status=status), status)

        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponseError(INVALID_JSON_TEMPLATE.format(path=path), status) from exc

    # This function does fetch one page of a repository's stargazers.
    # It returns the logins found on that page.
    def fetch_stargazer_page(self, repo_id: str, page: int) -> List[str]:
        data = self.get_json(
            STARGAZERS_ENDPOINT_TEMPLATE.format(repo_id=repo_id),
            params={"per_page": GITHUB_STARGAZERS_PER_PAGE, "page": page},
        )
        return parse_stargazer_logins(data, repo_id)

    def fetch_user(self, login: str) -> Any:
        return self.get_json(USER_ENDPOINT_TEMPLATE.format(login=login))

    # This function does approximate the stars a user owns.
    # Only the first page of their most recently updated repos is summed.
    def fetch_owned_stars(self, login: str) -> int:
        data = self.get_json(
            USER_REPOS_ENDPOINT_TEMPLATE.format(login=login),
            params={"sort": "updated", "direction": "desc", "per_page": GITHUB_USER_REPOS_PER_PAGE},
        )
        return sum_owned_stars(data, login)
    @staticmethod
    def _is_rate_limited(response: requests.Response) -> bool:
        if response.status_code not in RATE_LIMIT_STATUS_CODES:
            return False
        if response.status_code == 429:
            return True
        if response.headers.get(RATE_LIMIT_REMAINING_HEADER) == "0":
            return True
        if RETRY_AFTER_HEADER in response.headers:
            return True
        return RATE_LIMIT_TEXT in (response.text or "").lower()
