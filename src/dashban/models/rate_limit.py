"""Rate limit state models."""

from enum import Enum

from pydantic import BaseModel


class RateLimitStatus(str, Enum):
    """Request budget state."""

    NORMAL = "normal"
    WARNING = "warning"  # budget running low
    BLOCKED = "blocked"  # budget exhausted until reset


class RateLimitState(BaseModel):
    """Last known request budget for the API host."""

    remaining: int | None = None
    limit: int | None = None
    reset_at: int | None = None  # epoch seconds
    is_limited: bool = False
    last_checked: float | None = None  # epoch seconds
