"""Service layer for business logic."""

from .board_service import BoardService
from .config_service import ConfigService
from .issue_sync import RemoteIssueSync
from .label_installer import InstallResult, LabelInstaller, LabelReport
from .label_mapper import LabelStateMapper
from .notifier import BannerLevel, LoggingNotifier, Notifier
from .order_reconciler import OrderReconciler
from .order_store import CollapseStateStore, OrderStore
from .rate_limiter import RateLimiter, RateLimitProbe
from .repo_context import RepoContextService, RepoValidation

__all__ = [
    "BannerLevel",
    "BoardService",
    "CollapseStateStore",
    "ConfigService",
    "InstallResult",
    "LabelInstaller",
    "LabelReport",
    "LabelStateMapper",
    "LoggingNotifier",
    "Notifier",
    "OrderReconciler",
    "OrderStore",
    "RateLimitProbe",
    "RateLimiter",
    "RemoteIssueSync",
    "RepoContextService",
    "RepoValidation",
]
