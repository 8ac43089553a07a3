"""Current repository selection and the saved repository list."""

from __future__ import annotations

import logging

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..github.client import GitHubClient, GitHubClientError, GitHubNotFoundError
from ..models import RepoContext
from ..repositories import StorageError, StorageProtocol

logger = logging.getLogger(__name__)

_REPO_LIST = TypeAdapter(list[RepoContext])


class RepoValidation(BaseModel):
    """Outcome of checking a repository against the API."""

    valid: bool
    error: str | None = None
    access_level: str = "read-only"  # "read-only" or "full"
    can_modify: bool = False
    is_private: bool = False
    issue_count: int = 0


class RepoContextService:
    """Which repository the board shows.

    Resolution order: explicit override, stored current repository, default.
    Switching repository changes every persisted key the stores use; the
    rate limiter is untouched.
    """

    CURRENT_KEY = "dashban_current_repo"
    SAVED_KEY = "dashban_saved_repos"

    def __init__(
        self,
        storage: StorageProtocol,
        default: RepoContext,
        override: RepoContext | None = None,
    ) -> None:
        self._storage = storage
        self.default = default
        self._override = override

    def current(self) -> RepoContext:
        if self._override is not None:
            return self._override
        raw = self._storage.get_item(self.CURRENT_KEY)
        if raw:
            try:
                return RepoContext.model_validate_json(raw)
            except ValidationError as e:
                logger.warning("Discarding malformed current repository: %s", e)
        return self.default

    def switch(self, context: RepoContext) -> None:
        """Make ``context`` the current repository and remember it."""
        self._override = None
        try:
            self._storage.set_item(self.CURRENT_KEY, context.model_dump_json())
        except StorageError as e:
            logger.warning("Failed to save current repository: %s", e)
        self.add(context)
        logger.info("Switched repository to %s", context.full_name)

    def saved(self) -> list[RepoContext]:
        raw = self._storage.get_item(self.SAVED_KEY)
        if not raw:
            return []
        try:
            return _REPO_LIST.validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding malformed saved repositories: %s", e)
            return []

    def add(self, context: RepoContext) -> bool:
        """Remember a repository. Returns False if it was already saved."""
        repos = self.saved()
        if context in repos:
            return False
        repos.append(context)
        self._write_saved(repos)
        return True

    def remove(self, context: RepoContext) -> bool:
        repos = self.saved()
        if context not in repos:
            return False
        repos.remove(context)
        self._write_saved(repos)
        if self.current() == context:
            try:
                self._storage.remove_item(self.CURRENT_KEY)
            except StorageError as e:
                logger.warning("Failed to clear current repository: %s", e)
        return True

    def _write_saved(self, repos: list[RepoContext]) -> None:
        try:
            self._storage.set_item(self.SAVED_KEY, _REPO_LIST.dump_json(repos).decode())
        except StorageError as e:
            logger.warning("Failed to save repository list: %s", e)

    @staticmethod
    def validate(client: GitHubClient, context: RepoContext) -> RepoValidation:
        """Check that a repository exists and whether the token can write to it."""
        try:
            data = client.get_repository(context.owner, context.repo)
        except GitHubNotFoundError:
            return RepoValidation(valid=False, error="Repository not found or private")
        except GitHubClientError as e:
            if e.status_code is None:
                return RepoValidation(
                    valid=False, error="Network error or repository not accessible"
                )
            return RepoValidation(valid=False, error=f"GitHub API error: {e.status_code}")

        permissions = data.get("permissions") or {}
        can_modify = client.is_authenticated and bool(
            permissions.get("push") or permissions.get("admin")
        )
        return RepoValidation(
            valid=True,
            access_level="full" if can_modify else "read-only",
            can_modify=can_modify,
            is_private=bool(data.get("private")),
            issue_count=data.get("open_issues_count") or 0,
        )
