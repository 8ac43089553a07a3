"""Data models."""

from .card import (
    ISSUE_CLOSED,
    ISSUE_OPEN,
    Card,
    CardIdentity,
    CardKind,
    LiveBoard,
)
from .dashban_config import (
    BoardConfig,
    ColumnConfig,
    DashbanConfig,
    LabelConfig,
    RepoConfig,
)
from .issue import IssueSet, RemoteIssueRecord
from .order import CollapseStates, ColumnOrder, RepoContext
from .rate_limit import RateLimitState, RateLimitStatus

__all__ = [
    "ISSUE_CLOSED",
    "ISSUE_OPEN",
    "BoardConfig",
    "Card",
    "CardIdentity",
    "CardKind",
    "CollapseStates",
    "ColumnConfig",
    "ColumnOrder",
    "DashbanConfig",
    "IssueSet",
    "LabelConfig",
    "LiveBoard",
    "RateLimitState",
    "RateLimitStatus",
    "RemoteIssueRecord",
    "RepoConfig",
    "RepoContext",
]
