"""Tests for RepoContextService."""

from unittest.mock import MagicMock

import pytest

from dashban.github.client import GitHubClientError, GitHubNotFoundError
from dashban.models import RepoContext
from dashban.repositories import MemoryStorage
from dashban.services import RepoContextService

DEFAULT = RepoContext(owner="super3", repo="dashban")
OTHER = RepoContext(owner="octo", repo="board")


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def repos(storage: MemoryStorage) -> RepoContextService:
    return RepoContextService(storage, DEFAULT)


class TestCurrentRepository:
    def test_defaults(self, repos: RepoContextService):
        assert repos.current() == DEFAULT
        assert repos.saved() == []

    def test_switch_persists_and_saves(self, repos: RepoContextService, storage: MemoryStorage):
        repos.switch(OTHER)

        assert repos.current() == OTHER
        assert repos.saved() == [OTHER]
        assert RepoContextService(storage, DEFAULT).current() == OTHER

    def test_override_wins(self, storage: MemoryStorage):
        RepoContextService(storage, DEFAULT).switch(OTHER)
        pinned = RepoContext(owner="pinned", repo="repo")

        assert RepoContextService(storage, DEFAULT, pinned).current() == pinned

    def test_malformed_current_falls_back(self, repos: RepoContextService, storage: MemoryStorage):
        storage.set_item(RepoContextService.CURRENT_KEY, "{broken")
        assert repos.current() == DEFAULT

    def test_malformed_saved_list_is_empty(self, repos: RepoContextService, storage: MemoryStorage):
        storage.set_item(RepoContextService.SAVED_KEY, '{"owner": "x"}')
        assert repos.saved() == []


class TestSavedRepositories:
    def test_add_is_idempotent(self, repos: RepoContextService):
        assert repos.add(OTHER)
        assert not repos.add(OTHER)
        assert repos.saved() == [OTHER]

    def test_remove_current_resets_to_default(self, repos: RepoContextService):
        repos.switch(OTHER)

        assert repos.remove(OTHER)

        assert repos.saved() == []
        assert repos.current() == DEFAULT

    def test_remove_unknown(self, repos: RepoContextService):
        assert not repos.remove(OTHER)


class TestValidate:
    """Tests for checking a repository against the API."""

    def test_writable_repository(self):
        client = MagicMock()
        client.is_authenticated = True
        client.get_repository.return_value = {
            "private": True,
            "open_issues_count": 12,
            "permissions": {"admin": False, "push": True, "pull": True},
        }

        result = RepoContextService.validate(client, OTHER)

        assert result.valid
        assert result.can_modify
        assert result.access_level == "full"
        assert result.is_private
        assert result.issue_count == 12

    def test_unauthenticated_is_read_only(self):
        client = MagicMock()
        client.is_authenticated = False
        client.get_repository.return_value = {"private": False, "open_issues_count": 0}

        result = RepoContextService.validate(client, OTHER)

        assert result.valid
        assert not result.can_modify
        assert result.access_level == "read-only"

    def test_not_found(self):
        client = MagicMock()
        client.get_repository.side_effect = GitHubNotFoundError("Resource not found", 404)

        result = RepoContextService.validate(client, OTHER)

        assert not result.valid
        assert result.error == "Repository not found or private"

    def test_network_error(self):
        client = MagicMock()
        client.get_repository.side_effect = GitHubClientError("Request failed")

        result = RepoContextService.validate(client, OTHER)

        assert result.error == "Network error or repository not accessible"

    def test_other_status(self):
        client = MagicMock()
        client.get_repository.side_effect = GitHubClientError("boom", 502)

        assert RepoContextService.validate(client, OTHER).error == "GitHub API error: 502"
