"""Tests for influence scoring and the legend filter."""

import pytest

from github_fakes import make_profile
from stargazer_analyzer.models import normalize_company
from stargazer_analyzer.services.scoring_service import build_notable, calculate_score, is_legend


def test_score_formula() -> None:
    assert calculate_score(40000, 100, 20, 50) == pytest.approx(100207.0)
    assert calculate_score(0, 0, 0, 0) == 0


@pytest.mark.parametrize(
    "followers, stars, expected",
    [
        (5000, 0, True),
        (4999, 29999, False),
        (0, 30000, True),
        (6000, 500, True),
    ],
)
def test_legend_thresholds(followers, stars, expected) -> None:
    assert is_legend(followers, stars) is expected


def test_build_notable_projects_legends() -> None:
    profile = make_profile(
        "octo",
        followers=100,
        total_stars=40000,
        public_repos=15,
        public_gists=5,
        company="GitHub",
        bio="hi",
    )

    notable = build_notable(profile, ["A", "B"])

    assert notable is not None
    assert notable.name == "octo"
    assert notable.score == pytest.approx(100207.0)
    assert notable.repos_starred == ("A", "B")
    assert notable.to_dict() == {
        "login": "octo",
        "name": "octo",
        "avatarUrl": "",
        "company": "GitHub",
        "bio": "hi",
        "score": notable.score,
        "followers": 100,
        "totalStars": 40000,
        "reposStarred": ["A", "B"],
    }


def test_build_notable_drops_ordinary_users() -> None:
    assert build_notable(make_profile("plain", followers=10, total_stars=10), ["A"]) is None


def test_optional_fields_are_omitted_from_output() -> None:
    notable = build_notable(make_profile("big", followers=9000, name="Big Name"), ["A"])
    data = notable.to_dict()
    assert data["name"] == "Big Name"
    assert "company" not in data
    assert "bio" not in data


@pytest.mark.parametrize(
    "raw, expected",
    [("@google", "google"), ("  Anthropic ", "Anthropic"), ("@", None), ("", None), (None, None)],
)
def test_normalize_company(raw, expected) -> None:
    assert normalize_company(raw) == expected
