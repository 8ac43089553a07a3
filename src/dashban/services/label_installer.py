"""Checks for and creates the labels the board relies on."""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import BaseModel, Field

from ..github.client import GitHubAuthError, GitHubClient, GitHubClientError
from ..models import LabelConfig, RepoContext

logger = logging.getLogger(__name__)


class LabelReport(BaseModel):
    """Which required labels the repository lacks."""

    total: int
    missing: list[LabelConfig] = Field(default_factory=list)

    @property
    def missing_count(self) -> int:
        return len(self.missing)

    @property
    def existing(self) -> int:
        return self.total - self.missing_count


class InstallResult(BaseModel):
    success: list[str] = Field(default_factory=list)
    failed: list[tuple[str, str]] = Field(default_factory=list)  # (name, error)


class LabelInstaller:
    def __init__(
        self,
        client: GitHubClient,
        context: Callable[[], RepoContext],
        required: list[LabelConfig],
    ) -> None:
        self._client = client
        self._context = context
        self.required = required

    def existing_labels(self) -> set[str]:
        """Lowercased label names in the repository; empty on any failure."""
        if not self._client.is_authenticated:
            logger.info("Not authenticated with GitHub - cannot check labels")
            return set()
        ctx = self._context()
        try:
            labels = self._client.list_labels(ctx.owner, ctx.repo)
        except GitHubClientError as e:
            logger.error("Failed to check existing labels: %s", e)
            return set()
        return {label["name"].lower() for label in labels}

    def find_missing(self) -> LabelReport:
        existing = self.existing_labels()
        missing = [label for label in self.required if label.name.lower() not in existing]
        return LabelReport(total=len(self.required), missing=missing)

    def install_missing(self, missing: list[LabelConfig]) -> InstallResult:
        """Create each label. Failures are collected, not raised.

        Raises:
            GitHubAuthError: If the client has no token
        """
        if not self._client.is_authenticated:
            raise GitHubAuthError("Not authenticated with GitHub")

        ctx = self._context()
        result = InstallResult()
        for label in missing:
            try:
                self._client.create_label(
                    ctx.owner, ctx.repo, label.name, label.color, label.description
                )
            except GitHubClientError as e:
                logger.error("Failed to create label '%s': %s", label.name, e)
                result.failed.append((label.name, str(e)))
                continue
            result.success.append(label.name)
        logger.info(
            "Installed %d labels in %s (%d failed)",
            len(result.success),
            ctx.full_name,
            len(result.failed),
        )
        return result
