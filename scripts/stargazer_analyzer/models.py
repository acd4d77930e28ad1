#------------------------------------------------------------
#                          models.py
#     Defines dataclasses used by the stargazer pipeline
#        and validates upstream payloads into them.

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from .config import (
    BATCH_DELAY_SECONDS,
    CACHE_FLUSH_EVERY_BATCHES,
    ENRICHMENT_BATCH_SIZE,
    MAX_REQUEST_ATTEMPTS,
    MAX_STARGAZERS_PER_REPO,
    MAX_USERS_TO_PROCESS,
    RATE_LIMIT_DELAY_SECONDS,
    REPO_DELAY_SECONDS,
)
from .errors import MalformedResponseError

# This function does normalize a profile company string.
# It strips a leading "@" and whitespace; empty values become None.
def normalize_company(company: Optional[str]) -> Optional[str]:
    company = (company or "").strip()
    if company.startswith("@"):
        company = company[1:].strip()
    return company or None

def _require_dict(payload: Any, what: str) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise MalformedResponseError(f"{what}: expected an object, got {type(payload).__name__}")
    return payload

def _optional_text(payload: Dict[str, Any], key: str, what: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise MalformedResponseError(f"{what}: field {key!r} must be a string")
    return value

def _count(payload: Dict[str, Any], key: str, what: str) -> int:
    value = payload.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise MalformedResponseError(f"{what}: field {key!r} must be a non-negative integer")
    return value

# This function does validate a stargazer listing page.
# It returns the logins in page order.
def parse_stargazer_logins(payload: Any, repo_id: str) -> List[str]:
    what = f"stargazers of {repo_id}"
    if not isinstance(payload, list):
        raise MalformedResponseError(f"{what}: expected a list")
    logins = []
    for item in payload:
        login = _require_dict(item, what).get("login")
        if not isinstance(login, str) or not login:
            raise MalformedResponseError(f"{what}: entry without a login")
        logins.append(login)
    return logins

# This function does sum stargazer counts from a user's repository page.
# Only the first page is ever passed in, so the result is an approximation.
def sum_owned_stars(payload: Any, login: str) -> int:
    what = f"repositories of {login}"
    if not isinstance(payload, list):
        raise MalformedResponseError(f"{what}: expected a list")
    return sum(_count(_require_dict(item, what), "stargazers_count", what) for item in payload)

@dataclass(frozen=True)
class UserProfile:
    login: str
    name: Optional[str]
    avatar_url: str
    company: Optional[str]
    bio: Optional[str]
    followers: int
    public_repos: int
    public_gists: int
    total_stars: int

    @property
    def display_name(self) -> str:
        return self.name or self.login

    @property
    def contributions(self) -> int:
        return self.public_repos + self.public_gists

    @classmethod
    def from_api(cls, user_payload: Any, total_stars: int) -> "UserProfile":
        what = "user profile"
        payload = _require_dict(user_payload, what)
        company = normalize_company(_optional_text(payload, "company", what))
        return cls._from_payload(payload, total_stars, company, what)

    # Cached profiles were normalized when fetched and are rebuilt as stored.
    @classmethod
    def from_cache(cls, data: Any) -> "UserProfile":
        what = "cached user"
        payload = _require_dict(data, what)
        return cls._from_payload(
            payload,
            _count(payload, "totalStars", what),
            _optional_text(payload, "company", what),
            what,
        )

    @classmethod
    def _from_payload(
        cls,
        payload: Dict[str, Any],
        total_stars: int,
        company: Optional[str],
        what: str,
    ) -> "UserProfile":
        login = payload.get("login")
        if not isinstance(login, str) or not login:
            raise MalformedResponseError(f"{what}: missing login")
        return cls(
            login=login,
            name=_optional_text(payload, "name", what),
            avatar_url=_optional_text(payload, "avatar_url", what) or "",
            company=company,
            bio=_optional_text(payload, "bio", what),
            followers=_count(payload, "followers", what),
            public_repos=_count(payload, "public_repos", what),
            public_gists=_count(payload, "public_gists", what),
            total_stars=total_stars,
        )

    def to_cache(self) -> Dict[str, Any]:
        return {
            "login": self.login,
            "name": self.name,
            "avatar_url": self.avatar_url,
            "company": self.company,
            "bio": self.bio,
            "followers": self.followers,
            "public_repos": self.public_repos,
            "public_gists": self.public_gists,
            "totalStars": self.total_stars,
        }

@dataclass(frozen=True)
class NotableStargazer:
    login: str
    name: str
    avatar_url: str
    company: Optional[str]
    bio: Optional[str]
    score: float
    followers: int
    total_stars: int
    repos_starred: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "login": self.login,
            "name": self.name,
            "avatarUrl": self.avatar_url,
        }
        if self.company:
            data["company"] = self.company
        if self.bio:
            data["bio"] = self.bio
        data.update(
            score=self.score,
            followers=self.followers,
            totalStars=self.total_stars,
            reposStarred=list(self.repos_starred),
        )
        return data

@dataclass(frozen=True)
class CompanyCount:
    name: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "count": self.count}

@dataclass
class RepoStargazerStats:
    total_count: int
    notable_count: int
    top_stargazers: List[NotableStargazer]
    top_companies: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalCount": self.total_count,
            "notableCount": self.notable_count,
            "topStargazers": [stargazer.to_dict() for stargazer in self.top_stargazers],
            "topCompanies": list(self.top_companies),
        }

@dataclass
class StargazerIntelligence:
    total_unique_stargazers: int
    combined_reach: int
    top_stargazers: List[NotableStargazer]
    top_companies: List[CompanyCount]
    by_repo: Dict[str, RepoStargazerStats]
    last_updated: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalUniqueStargazers": self.total_unique_stargazers,
            "combinedReach": self.combined_reach,
            "topStargazers": [stargazer.to_dict() for stargazer in self.top_stargazers],
            "topCompanies": [company.to_dict() for company in self.top_companies],
            "byRepo": {repo: stats.to_dict() for repo, stats in self.by_repo.items()},
            "lastUpdated": self.last_updated,
        }

@dataclass
class PipelineConfig:
    github_token: str
    github_username: str
    repos: List[str] = field(default_factory=list)
    cache_path: str = ""
    output_path: str = ""
    max_stargazers_per_repo: int = MAX_STARGAZERS_PER_REPO
    max_users: int = MAX_USERS_TO_PROCESS
    batch_size: int = ENRICHMENT_BATCH_SIZE
    flush_every_batches: int = CACHE_FLUSH_EVERY_BATCHES
    repo_delay: float = REPO_DELAY_SECONDS
    batch_delay: float = BATCH_DELAY_SECONDS
    rate_limit_delay: float = RATE_LIMIT_DELAY_SECONDS
    max_attempts: int = MAX_REQUEST_ATTEMPTS

    def repo_id(self, repo: str) -> str:
        return f"{self.github_username}/{repo}"
