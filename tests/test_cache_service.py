"""Tests for the on-disk stargazer cache."""

import json
from pathlib import Path

from github_fakes import FIXED_NOW, make_profile
from stargazer_analyzer.config import CACHE_TTL_SECONDS
from stargazer_analyzer.services.cache_service import CacheEntry, CacheStore, load_cache, save_cache


class Clock:
    def __init__(self, now: float = FIXED_NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_entries_expire_exactly_at_ttl() -> None:
    clock = Clock()
    store = CacheStore(clock=clock)
    store.put_repo("owner/A", ["u1", "u2"])
    store.put_user("u1", make_profile("u1"))

    clock.now += CACHE_TTL_SECONDS - 1
    assert store.get_repo("owner/A") == ["u1", "u2"]
    assert store.get_user("u1") is not None

    clock.now += 1
    assert store.get_repo("owner/A") is None
    assert store.get_user("u1") is None
    assert "owner/A" in store.repos


def test_get_repo_returns_a_copy() -> None:
    store = CacheStore(clock=Clock())
    store.put_repo("owner/A", ["u1"])
    store.get_repo("owner/A").append("intruder")
    assert store.get_repo("owner/A") == ["u1"]


def test_save_and_load_preserve_entries_and_file_shape(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    clock = Clock()
    store = CacheStore(clock=clock)
    store.put_repo("owner/A", ["u1"])
    store.put_user("u1", make_profile("u1", followers=12, total_stars=7, company="Acme"))

    assert save_cache(store, str(path)) is True

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["repos"]["owner/A"] == {"stargazers": ["u1"], "timestamp": int(FIXED_NOW * 1000)}
    assert raw["users"]["u1"]["data"]["totalStars"] == 7
    assert raw["users"]["u1"]["timestamp"] == int(FIXED_NOW * 1000)

    loaded = load_cache(str(path), clock=clock)
    assert loaded.get_repo("owner/A") == ["u1"]
    assert loaded.get_user("u1") == make_profile("u1", followers=12, total_stars=7, company="Acme")


def test_missing_file_gives_empty_store(tmp_path: Path) -> None:
    store = load_cache(str(tmp_path / "absent.json"))
    assert store.users == {}
    assert store.repos == {}


def test_corrupt_file_falls_back_to_empty_store(tmp_path: Path, capsys) -> None:
    path = tmp_path / "cache.json"
    path.write_text("{not json", encoding="utf-8")

    store = load_cache(str(path))

    assert store.users == {}
    assert store.repos == {}
    assert "could not load cache" in capsys.readouterr().err


def test_malformed_entries_are_dropped_individually(tmp_path: Path, capsys) -> None:
    path = tmp_path / "cache.json"
    path.write_text(json.dumps({
        "users": {
            "good": {"data": {"login": "good", "followers": 3}, "timestamp": FIXED_NOW * 1000},
            "bad": {"data": {"login": "bad", "followers": "lots"}, "timestamp": FIXED_NOW * 1000},
        },
        "repos": {
            "owner/A": {"stargazers": ["good"], "timestamp": FIXED_NOW * 1000},
            "owner/B": {"stargazers": "good"},
        },
    }), encoding="utf-8")

    store = load_cache(str(path), clock=Clock())

    assert set(store.users) == {"good"}
    assert set(store.repos) == {"owner/A"}
    err = capsys.readouterr().err
    assert "'bad'" in err
    assert "'owner/B'" in err


def test_save_failure_is_reported_not_raised(tmp_path: Path, capsys) -> None:
    store = CacheStore(clock=Clock())
    store.put_repo("owner/A", [])
    target = tmp_path / "is_a_directory"
    target.mkdir()

    assert save_cache(store, str(target)) is False
    assert "could not save cache" in capsys.readouterr().err
    assert list(target.iterdir()) == []


def test_is_fresh_treats_none_as_miss() -> None:
    store = CacheStore(clock=Clock())
    assert store.is_fresh(None) is False
    assert store.is_fresh(CacheEntry(["x"], int(FIXED_NOW * 1000))) is True


def test_profiles_survive_a_save_and_load_unchanged(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    clock = Clock()
    original = make_profile(
        "edge",
        name="  Spaced Name ",
        company="@still-prefixed",
        bio=" bio ",
        avatar_url="https://avatars.example/edge",
        followers=5,
        public_repos=2,
        public_gists=1,
        total_stars=9,
    )
    store = CacheStore(clock=clock)
    store.put_user("edge", original)
    save_cache(store, str(path))

    loaded = load_cache(str(path), clock=clock).get_user("edge")

    assert loaded == original
