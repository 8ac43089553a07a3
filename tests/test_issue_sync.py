"""Tests for RemoteIssueSync."""

from unittest.mock import MagicMock

import pytest

from dashban.github.client import (
    GitHubClientError,
    GitHubForbiddenError,
    GitHubRateLimitError,
    GitHubValidationError,
)
from dashban.models import Card, IssueSet, LiveBoard, RemoteIssueRecord, RepoContext
from dashban.models.dashban_config import BoardConfig
from dashban.services import RemoteIssueSync

REPO = RepoContext(owner="octo", repo="board")


@pytest.fixture
def client() -> MagicMock:
    client = MagicMock()
    client.is_authenticated = True
    return client


@pytest.fixture
def notifier() -> MagicMock:
    return MagicMock()


@pytest.fixture
def sync(client: MagicMock, notifier: MagicMock) -> RemoteIssueSync:
    return RemoteIssueSync(client, lambda: REPO, notifier)


def issue(number: int, labels: list[str] | None = None, state: str = "open") -> dict:
    return {
        "number": number,
        "title": f"Issue {number}",
        "state": state,
        "labels": [{"name": name} for name in labels or []],
    }


class TestUpdateLabelsForColumnMove:
    """Tests for rewriting the status label after a move."""

    def test_reads_then_replaces_labels(self, sync: RemoteIssueSync, client: MagicMock):
        client.get_issue_labels.return_value = ["bug", "Review"]

        assert sync.update_labels_for_column_move(123, "inprogress")

        client.get_issue_labels.assert_called_once_with("octo", "board", 123)
        client.set_issue_labels.assert_called_once_with(
            "octo", "board", 123, ["bug", "in progress"]
        )

    def test_move_to_done_adds_no_label(self, sync: RemoteIssueSync, client: MagicMock):
        client.get_issue_labels.return_value = ["bug", "review"]

        sync.update_labels_for_column_move(123, "done")

        client.set_issue_labels.assert_called_once_with("octo", "board", 123, ["bug"])

    def test_failure_alerts_once(
        self, sync: RemoteIssueSync, client: MagicMock, notifier: MagicMock
    ):
        client.set_issue_labels.side_effect = GitHubForbiddenError("Permission denied.", 403)
        client.get_issue_labels.return_value = []

        assert not sync.update_labels_for_column_move(123, "review")

        notifier.alert.assert_called_once()
        message = notifier.alert.call_args.args[0]
        assert message.startswith("Failed to update GitHub issue labels: Permission denied.")
        assert "moved to Review on the board" in message

    def test_rate_limited_does_not_alert(
        self, sync: RemoteIssueSync, client: MagicMock, notifier: MagicMock
    ):
        """The limiter's banner covers rate limiting."""
        client.get_issue_labels.side_effect = GitHubRateLimitError("Rate limited")

        assert not sync.update_labels_for_column_move(123, "review")

        notifier.alert.assert_not_called()
        client.set_issue_labels.assert_not_called()

    def test_unauthenticated_makes_no_request(
        self, sync: RemoteIssueSync, client: MagicMock, notifier: MagicMock
    ):
        client.is_authenticated = False

        assert not sync.update_labels_for_column_move(123, "review")

        client.get_issue_labels.assert_not_called()
        notifier.alert.assert_not_called()


class TestCloseReopenUpdate:
    def test_close(self, sync: RemoteIssueSync, client: MagicMock):
        assert sync.close(5)
        client.update_issue.assert_called_once_with("octo", "board", 5, state="closed")

    def test_reopen(self, sync: RemoteIssueSync, client: MagicMock):
        assert sync.reopen(5)
        client.update_issue.assert_called_once_with("octo", "board", 5, state="open")

    def test_close_failure_alerts(
        self, sync: RemoteIssueSync, client: MagicMock, notifier: MagicMock
    ):
        client.update_issue.side_effect = GitHubClientError("GitHub API error: 500 - boom", 500)

        assert not sync.close(5)

        assert "wasn't closed on GitHub" in notifier.alert.call_args.args[0]

    def test_update_title_and_body(self, sync: RemoteIssueSync, client: MagicMock):
        client.update_issue.return_value = issue(5)

        record = sync.update(5, title="New", body="Text")

        assert record.number == 5
        client.update_issue.assert_called_once_with("octo", "board", 5, title="New", body="Text")

    def test_update_nothing(self, sync: RemoteIssueSync, client: MagicMock):
        assert sync.update(5) is None
        client.update_issue.assert_not_called()


class TestCreate:
    def test_create_returns_record(self, sync: RemoteIssueSync, client: MagicMock):
        client.create_issue.return_value = issue(77, ["bug"])

        record = sync.create("Fix", "Body", ["bug"])

        assert record.number == 77
        client.create_issue.assert_called_once_with("octo", "board", "Fix", "Body", ["bug"])

    def test_create_failure_alerts_with_fallback_message(
        self, sync: RemoteIssueSync, client: MagicMock, notifier: MagicMock
    ):
        client.create_issue.side_effect = GitHubValidationError(
            "GitHub API error: 422 - Validation Failed", 422
        )

        assert sync.create("Fix") is None

        message = notifier.alert.call_args.args[0]
        assert message.startswith("GitHub Issue Creation Failed:\nGitHub API error: 422")
        assert message.endswith("The task will be created locally instead.")

    def test_create_unauthenticated_alerts(
        self, sync: RemoteIssueSync, client: MagicMock, notifier: MagicMock
    ):
        client.is_authenticated = False

        assert sync.create("Fix") is None

        client.create_issue.assert_not_called()
        notifier.alert.assert_called_once()
        assert "Personal Access Token" in notifier.alert.call_args.args[0]


class TestArchive:
    """Tests for archiving an issue card."""

    def test_archive_labels_and_removes_card(self, sync: RemoteIssueSync, client: MagicMock):
        board = LiveBoard(BoardConfig.default().column_ids)
        card = Card.for_issue(9)
        board.append("review", card)

        assert sync.archive(9, card, board)

        client.add_issue_labels.assert_called_once_with("octo", "board", 9, ["archive"])
        assert board.counts()["review"] == 0

    def test_unauthenticated_still_removes_card(self, sync: RemoteIssueSync, client: MagicMock):
        client.is_authenticated = False
        board = LiveBoard(BoardConfig.default().column_ids)
        card = Card.for_issue(9)
        board.append("review", card)
        on_removed = MagicMock()

        assert not sync.archive(9, card, board, on_removed)

        client.add_issue_labels.assert_not_called()
        assert board.counts()["review"] == 0
        on_removed.assert_called_once()

    def test_failure_still_removes_card(
        self, sync: RemoteIssueSync, client: MagicMock, notifier: MagicMock
    ):
        client.add_issue_labels.side_effect = GitHubClientError("Request failed")
        board = LiveBoard(BoardConfig.default().column_ids)
        card = Card.for_issue(9)
        board.append("todo", card)

        assert not sync.archive(9, card, board)

        assert board.find_issue(9) is None
        assert "removed from the board anyway" in notifier.alert.call_args.args[0]


class TestLoadAndPlace:
    """Tests for fetching and placing issues."""

    def test_load_filters_archived(self, sync: RemoteIssueSync, client: MagicMock):
        issues = {
            "open": [issue(1), issue(2, ["archive"])],
            "closed": [issue(3, state="closed"), issue(4, ["Archive"], state="closed")],
        }
        client.list_issues.side_effect = lambda owner, repo, state: issues[state]

        result = sync.load()

        assert [record.number for record in result.open] == [1]
        assert [record.number for record in result.closed] == [3]

    def test_load_works_unauthenticated(self, sync: RemoteIssueSync, client: MagicMock):
        """Public repositories can be read without a token."""
        client.is_authenticated = False
        client.list_issues.return_value = []

        assert len(sync.load()) == 0

    def test_load_failure_returns_none(
        self, sync: RemoteIssueSync, client: MagicMock, notifier: MagicMock
    ):
        client.list_issues.side_effect = GitHubClientError("Request failed")

        assert sync.load() is None
        notifier.alert.assert_not_called()

    def test_place(self, sync: RemoteIssueSync):
        issues = IssueSet(
            open=[
                RemoteIssueRecord(number=1),
                RemoteIssueRecord(number=2, labels=["bug", "In Progress"]),
                RemoteIssueRecord(number=3, labels=["completed"]),
            ],
            closed=[RemoteIssueRecord(number=4, labels=["review"], state="closed")],
        )

        placement = sync.place(issues)

        assert [i.number for i in placement["backlog"]] == [1]
        assert [i.number for i in placement["inprogress"]] == [2]
        assert [i.number for i in placement["done"]] == [3, 4]
        assert placement["review"] == []
