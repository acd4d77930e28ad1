#------------------------------------------------------------
#                      cache_service.py
#      Loads, queries and saves the on-disk cache of
#          stargazer lists and enriched profiles.

import json
import os
import sys
import tempfile
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar
from ..config import CACHE_TTL_SECONDS
from ..errors import MalformedResponseError
from ..models import UserProfile

T = TypeVar("T")

CACHE_LOADED_MESSAGE = "Loaded cache with {users} users and {repos} repos"
CACHE_SAVED_MESSAGE = "Saved cache with {users} users"
CACHE_UNREADABLE_WARNING = "WARNING: could not load cache at {path}, starting fresh: {error}"
CACHE_ENTRY_WARNING = "WARNING: dropping malformed cache entry {kind} {key!r}: {error}"
CACHE_SAVE_ERROR = "ERROR: could not save cache to {path}: {error}"

@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    fetched_at: int  # epoch milliseconds

def _now_ms(clock: Callable[[], float]) -> int:
    return int(clock() * 1000)

class CacheStore:

    def __init__(
        self,
        users: Optional[Dict[str, CacheEntry[UserProfile]]] = None,
        repos: Optional[Dict[str, CacheEntry[List[str]]]] = None,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.users: Dict[str, CacheEntry[UserProfile]] = users if users is not None else {}
        self.repos: Dict[str, CacheEntry[List[str]]] = repos if repos is not None else {}
        self.ttl_ms = int(ttl_seconds * 1000)
        self.clock = clock

    # This function does check whether an entry is still inside the TTL.
    # Expired entries behave exactly like missing ones.
    def is_fresh(self, entry: Optional[CacheEntry]) -> bool:
        if entry is None:
            return False
        return _now_ms(self.clock) - entry.fetched_at < self.ttl_ms

    def user_entry(self, login: str) -> Optional[CacheEntry[UserProfile]]:
        entry = self.users.get(login)
        return entry if self.is_fresh(entry) else None

    def repo_entry(self, repo_id: str) -> Optional[CacheEntry[List[str]]]:
        entry = self.repos.get(repo_id)
        return entry if self.is_fresh(entry) else None

    def get_user(self, login: str) -> Optional[UserProfile]:
        entry = self.user_entry(login)
        return entry.value if entry else None

    def get_repo(self, repo_id: str) -> Optional[List[str]]:
        entry = self.repo_entry(repo_id)
        return list(entry.value) if entry else None

    def put_user(self, login: str, profile: UserProfile) -> None:
        self.users[login] = CacheEntry(profile, _now_ms(self.clock))

    def put_repo(self, repo_id: str, logins: List[str]) -> None:
        self.repos[repo_id] = CacheEntry(list(logins), _now_ms(self.clock))

    def to_json(self) -> Dict[str, Any]:
        return {
            "users": {
                login: {"data": entry.value.to_cache(), "timestamp": entry.fetched_at}
                for login, entry in self.users.items()
            },
            "repos": {
                repo_id: {"stargazers": list(entry.value), "timestamp": entry.fetched_at}
                for repo_id, entry in self.repos.items()
            },
        }

def _timestamp(raw: Dict[str, Any]) -> int:
    value = raw.get("timestamp")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedResponseError("missing timestamp")
    return int(value)

def _parse_user_entry(raw: Any) -> CacheEntry[UserProfile]:
    if not isinstance(raw, dict):
        raise MalformedResponseError("expected an object")
    return CacheEntry(UserProfile.from_cache(raw.get("data")), _timestamp(raw))

def _parse_repo_entry(raw: Any) -> CacheEntry[List[str]]:
    if not isinstance(raw, dict):
        raise MalformedResponseError("expected an object")
    stargazers = raw.get("stargazers")
    if not isinstance(stargazers, list) or not all(isinstance(login, str) for login in stargazers):
        raise MalformedResponseError("stargazers must be a list of logins")
    return CacheEntry(list(stargazers), _timestamp(raw))

# This function does load the cache file from disk.
# Missing or unreadable files yield an empty store, never an exception.
def load_cache(
    path: str,
    ttl_seconds: float = CACHE_TTL_SECONDS,
    clock: Callable[[], float] = time.time,
) -> CacheStore:
    store = CacheStore(ttl_seconds=ttl_seconds, clock=clock)
    if not os.path.exists(path):
        return store

    try:
        with open(path, "r", encoding="utf-8") as file_handle:
            data = json.load(file_handle)
        if not isinstance(data, dict):
            raise ValueError("top-level value is not an object")
        raw_users = data.get("users") or {}
        raw_repos = data.get("repos") or {}
        if not isinstance(raw_users, dict) or not isinstance(raw_repos, dict):
            raise ValueError("users and repos must be objects")
    except (OSError, ValueError) as exc:
        print(CACHE_UNREADABLE_WARNING.format(path=path, error=exc), file=sys.stderr)
        return store

    for login, raw in raw_users.items():
        try:
            store.users[login] = _parse_user_entry(raw)
        except MalformedResponseError as exc:
            print(CACHE_ENTRY_WARNING.format(kind="user", key=login, error=exc), file=sys.stderr)
    for repo_id, raw in raw_repos.items():
        try:
            store.repos[repo_id] = _parse_repo_entry(raw)
        except MalformedResponseError as exc:
            print(CACHE_ENTRY_WARNING.format(kind="repo", key=repo_id, error=exc), file=sys.stderr)

    print(CACHE_LOADED_MESSAGE.format(users=len(store.users), repos=len(store.repos)))
    return store

# This function does write the cache to disk through a temp file.
# Errors are reported and swallowed; it returns whether the write succeeded.
def save_cache(store: CacheStore, path: str) -> bool:
    directory = os.path.dirname(os.path.abspath(path))
    temp_path = None
    try:
        os.makedirs(directory, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=directory, suffix=".tmp", delete=False
        ) as file_handle:
            temp_path = file_handle.name
            json.dump(store.to_json(), file_handle, indent=2)
        os.replace(temp_path, path)
    except (OSError, TypeError, ValueError) as exc:
        print(CACHE_SAVE_ERROR.format(path=path, error=exc), file=sys.stderr)
        if temp_path and os.path.exists(temp_path):
            os.remove(temp_path)
        return False

    print(CACHE_SAVED_MESSAGE.format(users=len(store.users)))
    return True
