"""GitHub API request budget tracking.

The limiter is a three state machine:

- NORMAL: budget unknown or at least ``warning_threshold`` requests left
- WARNING: fewer than ``warning_threshold`` requests left
- BLOCKED: no requests left until ``reset_at``

Every API response feeds its ``x-ratelimit-*`` headers in through
``update_from_headers``. A BLOCKED state clears itself once the reset time
has passed, checked lazily whenever the state is read.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable, Mapping
from typing import Any

from ..github.client import GitHubClient, GitHubClientError
from ..models import RateLimitState, RateLimitStatus
from ..utils import format_reset_time
from .notifier import BannerLevel, Notifier

logger = logging.getLogger(__name__)

DEFAULT_WARNING_THRESHOLD = 10
DEFAULT_LIMIT = 5000
FALLBACK_BLOCK_SECONDS = 3600


class RateLimiter:
    """Tracks the request budget for one API host.

    One instance is shared by every repository the board shows, since the
    budget belongs to the token and host rather than the repository.
    """

    def __init__(
        self,
        notifier: Notifier | None = None,
        warning_threshold: int = DEFAULT_WARNING_THRESHOLD,
        authenticated: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the limiter.

        Args:
            notifier: Receives banner show/hide calls on state transitions
            warning_threshold: Remaining count below which WARNING is entered
            authenticated: Whether requests carry a token (changes banner text)
            clock: Epoch seconds source, injectable for tests
        """
        self._notifier = notifier
        self.warning_threshold = warning_threshold
        self.authenticated = authenticated
        self._clock = clock
        self._lock = threading.Lock()
        self._state = RateLimitState()
        self._status = RateLimitStatus.NORMAL

    # --- State access ---

    @property
    def state(self) -> RateLimitState:
        """Snapshot of the current budget."""
        self._refresh_expiry()
        with self._lock:
            return self._state.model_copy()

    @property
    def status(self) -> RateLimitStatus:
        self._refresh_expiry()
        with self._lock:
            return self._status

    def is_rate_limited(self) -> bool:
        return self.status is RateLimitStatus.BLOCKED

    def guard(self) -> bool:
        """Return True if a request may be sent now.

        Callers must not send the request when this returns False.
        """
        if self.is_rate_limited():
            logger.debug("Request blocked: rate limited until %s", self._state.reset_at)
            return False
        return True

    # --- Updates ---

    def update_from_headers(self, status_code: int, headers: Mapping[str, str]) -> bool:
        """Recompute state from a response.

        Responses without rate limit headers leave the state untouched.

        Returns:
            True if the budget is now exhausted.
        """
        lowered = {key.lower(): value for key, value in headers.items()}

        retry_after = lowered.get("retry-after")
        if status_code in (403, 429) and retry_after is not None:
            # Secondary rate limit: the API names the wait instead of a budget
            try:
                wait = int(retry_after)
            except ValueError:
                wait = FALLBACK_BLOCK_SECONDS
            self.mark_exhausted(int(self._clock()) + wait)
            return True

        if "x-ratelimit-remaining" not in lowered:
            return self.is_rate_limited()

        try:
            remaining = int(lowered["x-ratelimit-remaining"])
            limit = int(lowered.get("x-ratelimit-limit", DEFAULT_LIMIT))
            reset_at = int(lowered.get("x-ratelimit-reset", 0))
        except ValueError:
            logger.warning("Ignoring malformed rate limit headers: %s", lowered)
            return self.is_rate_limited()

        return self._apply(remaining, limit, reset_at)

    def update_from_core(self, core: Mapping[str, Any]) -> None:
        """Recompute state from the ``resources.core`` block of /rate_limit."""
        self._apply(int(core["remaining"]), int(core["limit"]), int(core["reset"]))

    def mark_exhausted(self, reset_at: int | None = None) -> None:
        """Enter BLOCKED after a rate limit rejection.

        Without a known reset time the block lasts one hour.
        """
        now = self._clock()
        with self._lock:
            if reset_at is None:
                known = self._state.reset_at
                reset_at = known if known and known > now else int(now) + FALLBACK_BLOCK_SECONDS
            self._state.remaining = 0
            self._state.limit = self._state.limit or DEFAULT_LIMIT
            self._state.reset_at = reset_at
            self._state.is_limited = True
            self._state.last_checked = now
            transition = self._set_status(RateLimitStatus.BLOCKED)
        self._notify(transition)

    def clear(self) -> None:
        """Forget the block and return to NORMAL."""
        with self._lock:
            self._clear_locked()
            transition = self._set_status(RateLimitStatus.NORMAL)
        self._notify(transition)

    def probe(self, client: GitHubClient) -> RateLimitState | None:
        """Ask the API for the current budget.

        The /rate_limit endpoint does not count against the budget, so this
        runs even while BLOCKED. Failures are logged and return None.
        """
        try:
            self.update_from_core(client.get_rate_limit())
        except GitHubClientError as e:
            logger.warning("Failed to check rate limit: %s", e)
            return None
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Unexpected rate limit response: %r", e)
            return None

        state = self.state
        logger.info(
            "GitHub API rate limit: %s/%s remaining (resets at %s)",
            state.remaining,
            state.limit,
            format_reset_time(state.reset_at or 0),
        )
        return state

    # --- Internals ---

    def _apply(self, remaining: int, limit: int, reset_at: int) -> bool:
        now = self._clock()
        with self._lock:
            self._state.remaining = remaining
            self._state.limit = limit
            self._state.reset_at = reset_at
            self._state.last_checked = now
            self._state.is_limited = remaining == 0 and now < reset_at
            if self._state.is_limited:
                new_status = RateLimitStatus.BLOCKED
            elif 0 < remaining < self.warning_threshold:
                new_status = RateLimitStatus.WARNING
            else:
                new_status = RateLimitStatus.NORMAL
            transition = self._set_status(new_status)
        self._notify(transition)
        return new_status is RateLimitStatus.BLOCKED

    def _refresh_expiry(self) -> None:
        now = self._clock()
        with self._lock:
            if not self._state.is_limited:
                return
            if self._state.reset_at is not None and now < self._state.reset_at:
                return
            logger.info("Rate limit reset time passed, unblocking requests")
            self._clear_locked()
            transition = self._set_status(RateLimitStatus.NORMAL)
        self._notify(transition)

    def _clear_locked(self) -> None:
        self._state.is_limited = False
        self._state.reset_at = None
        self._state.remaining = None

    def _set_status(
        self, new_status: RateLimitStatus
    ) -> tuple[RateLimitStatus, RateLimitState] | None:
        """Record a status change. Returns what to announce, or None."""
        if new_status is self._status:
            return None
        logger.info("Rate limit status: %s -> %s", self._status.value, new_status.value)
        self._status = new_status
        return new_status, self._state.model_copy()

    def _notify(self, transition: tuple[RateLimitStatus, RateLimitState] | None) -> None:
        # Called outside the lock so a notifier may read the limiter back
        if transition is None or self._notifier is None:
            return
        status, state = transition
        if status is RateLimitStatus.NORMAL:
            self._notifier.hide_banner()
            return

        details = f"{state.remaining}/{state.limit or DEFAULT_LIMIT} requests remaining"
        if status is RateLimitStatus.BLOCKED:
            reset_at = state.reset_at or int(self._clock())
            minutes = max(0, math.ceil((reset_at - self._clock()) / 60))
            if self.authenticated:
                message = (
                    f"GitHub API rate limit exceeded - Resets in {minutes} minutes "
                    f"at {format_reset_time(reset_at)}."
                )
            else:
                message = (
                    "GitHub API rate limit exceeded - Authenticate with a GitHub token "
                    "for 83x higher limits (5,000/hour vs 60/hour). "
                    f"Resets in {minutes} minutes at {format_reset_time(reset_at)}."
                )
            self._notifier.show_banner(BannerLevel.ERROR, message, details)
        else:
            message = f"GitHub API rate limit low - Only {state.remaining} requests remaining."
            if not self.authenticated:
                message += " Consider authenticating for higher limits."
            self._notifier.show_banner(BannerLevel.WARNING, message, details)


class RateLimitProbe:
    """Refreshes the budget on a timer instead of waiting for failures.

    The timer re-arms itself after every tick and skips the request while
    the limiter is BLOCKED.
    """

    def __init__(self, limiter: RateLimiter, client: GitHubClient, interval: float = 300.0) -> None:
        self._limiter = limiter
        self._client = client
        self.interval = interval
        self._timer: threading.Timer | None = None
        self._stopped = threading.Event()

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._stopped.is_set()

    def start(self, immediate: bool = True) -> None:
        """Start probing. With ``immediate`` the first probe runs right away."""
        self._stopped.clear()
        if immediate:
            self._limiter.probe(self._client)
        self._schedule()
        logger.info("Rate limit probe started (every %.0fs)", self.interval)

    def stop(self) -> None:
        self._stopped.set()
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def __enter__(self) -> RateLimitProbe:
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()

    def tick(self) -> None:
        """Run one probe cycle."""
        if self._stopped.is_set():
            return
        if not self._limiter.is_rate_limited():
            self._limiter.probe(self._client)

    def _run(self) -> None:
        try:
            self.tick()
        finally:
            if not self._stopped.is_set():
                self._schedule()

    def _schedule(self) -> None:
        self._timer = threading.Timer(self.interval, self._run)
        self._timer.daemon = True
        self._timer.start()
