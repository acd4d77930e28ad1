"""Tests for GitHub response handling and error classification."""

import pytest
import requests

from github_fakes import NOT_JSON, FakeResponse, ok, rate_limited, stargazers
from stargazer_analyzer.errors import (
    MalformedResponseError,
    NotFoundError,
    RateLimitedError,
    TransientUpstreamError,
)
from stargazer_analyzer.services.github_service import GitHubService


def test_headers_carry_the_token(github) -> None:
    headers = github.headers()
    assert headers["Authorization"] == "Bearer test-token"
    assert headers["Accept"] == "application/vnd.github+json"


def test_fetch_stargazer_page_returns_logins(github, session) -> None:
    session.add("/repos/owner/A/stargazers", stargazers("u1", "u2"), page=3)
    assert github.fetch_stargazer_page("owner/A", 3) == ["u1", "u2"]
    assert session.calls == [("/repos/owner/A/stargazers", 3)]


def test_fetch_owned_stars_sums_first_page(github, session) -> None:
    session.add("/users/u1/repos", ok([
        {"name": "x", "stargazers_count": 10},
        {"name": "y", "stargazers_count": None},
        {"name": "z", "stargazers_count": 32},
    ]))
    assert github.fetch_owned_stars("u1") == 42


@pytest.mark.parametrize(
    "response, error",
    [
        (rate_limited(), RateLimitedError),
        (FakeResponse(429, {}), RateLimitedError),
        (FakeResponse(403, {}, headers={"Retry-After": "60"}), RateLimitedError),
        (FakeResponse(403, {}, text="You have exceeded a secondary rate limit"), RateLimitedError),
        (FakeResponse(403, {"message": "Forbidden"}, text="Forbidden"), TransientUpstreamError),
        (FakeResponse(404, {"message": "Not Found"}), NotFoundError),
        (FakeResponse(502, {}), TransientUpstreamError),
        (FakeResponse(200, NOT_JSON), MalformedResponseError),
    ],
)
def test_get_json_classifies_failures(github, session, response, error) -> None:
    session.add("/users/u1", response)
    with pytest.raises(error):
        github.fetch_user("u1")


def test_network_errors_become_transient(github, session) -> None:
    session.add("/users/u1", requests.ConnectionError("reset"))
    with pytest.raises(TransientUpstreamError):
        github.fetch_user("u1")


def test_unexpected_shapes_are_rejected_at_the_boundary(github, session) -> None:
    session.add("/repos/owner/A/stargazers", ok({"message": "not a list"}))
    session.add("/users/u1/repos", ok([{"stargazers_count": "many"}]))

    with pytest.raises(MalformedResponseError):
        github.fetch_stargazer_page("owner/A", 1)
    with pytest.raises(MalformedResponseError):
        github.fetch_owned_stars("u1")


def test_defaults_to_the_requests_module(config) -> None:
    assert GitHubService(config).session is requests
