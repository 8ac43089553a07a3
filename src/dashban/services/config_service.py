"""Configuration service for loading dashban.yml."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..models.dashban_config import BoardConfig, DashbanConfig

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for loading and caching application configuration."""

    CONFIG_FILE = "dashban.yml"

    def __init__(self, project_root: Path) -> None:
        """Initialize the config service.

        Args:
            project_root: Directory containing dashban.yml
        """
        self.project_root = project_root
        self._config: DashbanConfig | None = None
        self._config_error: str | None = None

    @property
    def has_config_error(self) -> bool:
        """Check if there was an error loading config."""
        return self._config_error is not None

    @property
    def config_error(self) -> str | None:
        """Get the config error message if any."""
        return self._config_error

    def get_config(self) -> DashbanConfig:
        """Get configuration, loading from file if not cached."""
        if self._config is None:
            self._config = self._load_config()
        return self._config

    def get_board_config(self) -> BoardConfig:
        """Convenience method to get board configuration."""
        return self.get_config().board

    def reload(self) -> None:
        """Clear cached configuration, forcing reload on next access."""
        self._config = None
        self._config_error = None

    def _load_config(self) -> DashbanConfig:
        """Load configuration from file or return default."""
        config_path = self.project_root / self.CONFIG_FILE
        self._config_error = None

        if not config_path.exists():
            logger.debug("No %s found, using defaults", self.CONFIG_FILE)
            return DashbanConfig.default()

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f)

            if data is None:
                self._config_error = f"{self.CONFIG_FILE} is empty"
                logger.warning(self._config_error)
                return DashbanConfig.default()

            config = DashbanConfig(**data)
            logger.info("Loaded %s with %d columns", self.CONFIG_FILE, len(config.board.columns))
            return config

        except yaml.YAMLError as e:
            self._config_error = f"Invalid YAML in {self.CONFIG_FILE}: {e}"
            logger.warning(self._config_error)
            return DashbanConfig.default()

        except (ValidationError, TypeError) as e:
            self._config_error = f"Invalid configuration in {self.CONFIG_FILE}: {e}"
            logger.warning(self._config_error)
            return DashbanConfig.default()

        except OSError as e:
            self._config_error = f"Error loading {self.CONFIG_FILE}: {e}"
            logger.warning(self._config_error)
            return DashbanConfig.default()
