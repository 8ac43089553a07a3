"""User-facing notifications."""

import logging
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class BannerLevel(str, Enum):
    """Banner styles."""

    WARNING = "warning"  # dismissible advisory
    ERROR = "error"  # persistent until cleared


class Notifier(Protocol):
    """Where the sync layer reports things the user must see.

    The UI owns presentation; the sync layer only decides what to say.
    """

    def alert(self, message: str) -> None:
        """Blocking message for a failed remote operation."""
        ...

    def show_banner(self, level: BannerLevel, message: str, details: str) -> None:
        """Show or replace the rate limit banner."""
        ...

    def hide_banner(self) -> None:
        """Hide the rate limit banner if shown."""
        ...


class LoggingNotifier:
    """Notifier that only writes to the log. Used when no UI is attached."""

    def __init__(self) -> None:
        self.banner: tuple[BannerLevel, str, str] | None = None

    def alert(self, message: str) -> None:
        logger.warning("ALERT: %s", message)

    def show_banner(self, level: BannerLevel, message: str, details: str) -> None:
        self.banner = (level, message, details)
        logger.warning("Banner (%s): %s [%s]", level.value, message, details)

    def hide_banner(self) -> None:
        if self.banner is not None:
            logger.info("Banner cleared")
        self.banner = None
