#------------------------------------------------------------
#                      retry_service.py
#          Retries upstream calls on rate limiting
#                   with a fixed delay.

import time
from typing import Callable, Optional, TypeVar
from ..errors import RateLimitedError

T = TypeVar("T")

RATE_LIMIT_WAIT_MESSAGE = "Rate limit hit{label}, waiting {delay:g}s... (attempt {attempt}/{attempts})"

# This function does call fn and retry it while it is rate limited.
# Other errors, including NotFoundError, propagate on the first attempt.
# After the last attempt the final RateLimitedError is re-raised.
def call_with_retry(
    fn: Callable[[], T],
    attempts: int,
    delay: float,
    sleep: Callable[[float], None] = time.sleep,
    label: Optional[str] = None,
) -> T:
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except RateLimitedError:
            if attempt == attempts:
                raise
            print(RATE_LIMIT_WAIT_MESSAGE.format(
                label=f" for {label}" if label else "",
                delay=delay,
                attempt=attempt,
                attempts=attempts,
            ))
            sleep(delay)

    raise AssertionError("unreachable")
