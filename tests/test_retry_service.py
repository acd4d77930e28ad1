"""Tests for the rate-limit retry combinator."""

import pytest

from github_fakes import Sleeper
from stargazer_analyzer.errors import NotFoundError, RateLimitedError, TransientUpstreamError
from stargazer_analyzer.services.retry_service import call_with_retry


class Flaky:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def test_retries_rate_limited_calls_with_fixed_delay() -> None:
    sleeper = Sleeper()
    fn = Flaky(RateLimitedError("slow down", 403), RateLimitedError("slow down", 403), "done")

    assert call_with_retry(fn, attempts=3, delay=15, sleep=sleeper) == "done"
    assert fn.calls == 3
    assert sleeper.delays == [15, 15]


def test_gives_up_after_the_last_attempt() -> None:
    sleeper = Sleeper()
    fn = Flaky(*[RateLimitedError("slow down", 429)] * 3)

    with pytest.raises(RateLimitedError):
        call_with_retry(fn, attempts=3, delay=15, sleep=sleeper)
    assert fn.calls == 3
    assert sleeper.delays == [15, 15]


@pytest.mark.parametrize("error", [NotFoundError("gone", 404), TransientUpstreamError("boom", 500)])
def test_other_errors_are_not_retried(error) -> None:
    sleeper = Sleeper()
    fn = Flaky(error, "never reached")

    with pytest.raises(type(error)):
        call_with_retry(fn, attempts=3, delay=15, sleep=sleeper)
    assert fn.calls == 1
    assert sleeper.delays == []


def test_rejects_non_positive_attempts() -> None:
    with pytest.raises(ValueError):
        call_with_retry(lambda: None, attempts=0, delay=1)
