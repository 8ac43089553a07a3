"""Tests for LabelInstaller."""

from unittest.mock import MagicMock

import pytest

from dashban.github.client import GitHubAuthError, GitHubClientError, GitHubValidationError
from dashban.models import LabelConfig, RepoContext
from dashban.services import LabelInstaller

REQUIRED = [
    LabelConfig(name="in progress", color="3B82F6"),
    LabelConfig(name="review", color="8B5CF6"),
    LabelConfig(name="archive", color="6B7280"),
]


@pytest.fixture
def client() -> MagicMock:
    client = MagicMock()
    client.is_authenticated = True
    return client


@pytest.fixture
def installer(client: MagicMock) -> LabelInstaller:
    return LabelInstaller(client, lambda: RepoContext(owner="o", repo="r"), REQUIRED)


class TestFindMissing:
    def test_case_insensitive_match(self, installer: LabelInstaller, client: MagicMock):
        client.list_labels.return_value = [{"name": "In Progress"}, {"name": "bug"}]

        report = installer.find_missing()

        assert [label.name for label in report.missing] == ["review", "archive"]
        assert report.total == 3
        assert report.existing == 1

    def test_unauthenticated_reports_all_missing(self, installer: LabelInstaller, client: MagicMock):
        client.is_authenticated = False
        assert installer.find_missing().missing_count == 3
        client.list_labels.assert_not_called()

    def test_list_failure_reports_all_missing(self, installer: LabelInstaller, client: MagicMock):
        client.list_labels.side_effect = GitHubClientError("Request failed")
        assert installer.find_missing().missing_count == 3


class TestInstallMissing:
    def test_collects_success_and_failure(self, installer: LabelInstaller, client: MagicMock):
        client.create_label.side_effect = [
            {"name": "review"},
            GitHubValidationError("GitHub API error: 422 - already_exists", 422),
        ]

        result = installer.install_missing(REQUIRED[1:])

        assert result.success == ["review"]
        assert result.failed == [("archive", "GitHub API error: 422 - already_exists")]
        client.create_label.assert_any_call("o", "r", "review", "8B5CF6", "")

    def test_requires_token(self, installer: LabelInstaller, client: MagicMock):
        client.is_authenticated = False
        with pytest.raises(GitHubAuthError):
            installer.install_missing(REQUIRED)
