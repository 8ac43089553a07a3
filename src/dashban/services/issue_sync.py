"""Remote issue operations behind the board.

Every mutation here is fire-and-forget from the board's point of view: the
board applies its change first, then calls in here. A remote failure is
reported once through the notifier and never undone locally; the board is
simply out of sync until the next load. Nothing is retried.

Label updates are read-modify-write because the labels endpoint replaces
the whole set. Two near-simultaneous moves of the same issue race on the
read; the last write wins.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..github.client import (
    GitHubClient,
    GitHubClientError,
    GitHubRateLimitError,
)
from ..models import Card, IssueSet, LiveBoard, RemoteIssueRecord, RepoContext
from .label_mapper import LabelStateMapper
from .notifier import Notifier

logger = logging.getLogger(__name__)


def _column_display_name(column: str) -> str:
    if column == "inprogress":
        return "In Progress"
    return column[:1].upper() + column[1:]


class RemoteIssueSync:
    """Create/read/update/close/archive issues in the current repository."""

    def __init__(
        self,
        client: GitHubClient,
        context: Callable[[], RepoContext],
        notifier: Notifier,
        mapper: LabelStateMapper | None = None,
    ) -> None:
        """
        Args:
            client: REST client; its rate limiter gates every call
            context: Returns the current repository
            notifier: Receives user-facing failure messages
            mapper: Column/label translation
        """
        self._client = client
        self._context = context
        self._notifier = notifier
        self.mapper = mapper or LabelStateMapper()

    @property
    def client(self) -> GitHubClient:
        return self._client

    @property
    def is_authenticated(self) -> bool:
        return self._client.is_authenticated

    def _require_auth(self, action: str) -> bool:
        if self.is_authenticated:
            return True
        logger.info("Not authenticated with GitHub - cannot %s", action)
        return False

    def _report(self, error: GitHubClientError, message: str) -> None:
        """Surface a failure. Rate limiting already shows its own banner."""
        if isinstance(error, GitHubRateLimitError):
            logger.warning("%s: %s", message.splitlines()[0], error)
            return
        self._notifier.alert(message)

    # --- Mutations ---

    def create(
        self, title: str, description: str = "", labels: list[str] | None = None
    ) -> RemoteIssueRecord | None:
        """Create an issue. Returns None when unauthenticated or on failure.

        The caller inserts the card; nothing here touches the board.
        """
        if not self._require_auth("create issue"):
            self._notifier.alert(
                "Please connect to GitHub with a Personal Access Token first "
                "to create GitHub issues.\n\nThe task will be created locally instead."
            )
            return None
        ctx = self._context()
        try:
            data = self._client.create_issue(ctx.owner, ctx.repo, title, description, labels)
        except GitHubClientError as e:
            logger.error("Failed to create GitHub issue: %s", e)
            detail = str(e) if e.status_code else (
                "Failed to create GitHub issue. Check your token permissions and network connection."
            )
            self._report(
                e,
                f"GitHub Issue Creation Failed:\n{detail}\n\n"
                "The task will be created locally instead.",
            )
            return None
        issue = RemoteIssueRecord.from_api(data)
        logger.info("Created GitHub issue #%d in %s", issue.number, ctx.full_name)
        return issue

    def update_labels_for_column_move(self, issue_number: int, column: str) -> bool:
        """Rewrite the status label after a card moved to ``column``.

        Current labels are fetched first so unrelated labels survive the
        full-set replace.
        """
        if not self._require_auth("update issue labels"):
            return False
        ctx = self._context()
        try:
            current = self._client.get_issue_labels(ctx.owner, ctx.repo, issue_number)
            updated = self.mapper.apply_column(current, column)
            self._client.set_issue_labels(ctx.owner, ctx.repo, issue_number, updated)
        except GitHubClientError as e:
            logger.error("Failed to update labels for issue #%d: %s", issue_number, e)
            self._report(
                e,
                f"Failed to update GitHub issue labels: {e}\n\n"
                f"The issue was moved to {_column_display_name(column)} on the board "
                "but the labels weren't updated on GitHub.",
            )
            return False
        logger.info("Updated labels for issue #%d (moved to %s): %s", issue_number, column, updated)
        return True

    def close(self, issue_number: int) -> bool:
        """Close the issue. Labels are left alone."""
        return self._set_state(issue_number, "closed")

    def reopen(self, issue_number: int) -> bool:
        """Reopen the issue. Labels are left alone."""
        return self._set_state(issue_number, "open")

    def _set_state(self, issue_number: int, state: str) -> bool:
        verb = "close" if state == "closed" else "reopen"
        if not self._require_auth(f"{verb} issue"):
            return False
        ctx = self._context()
        try:
            self._client.update_issue(ctx.owner, ctx.repo, issue_number, state=state)
        except GitHubClientError as e:
            logger.error("Failed to %s issue #%d: %s", verb, issue_number, e)
            if state == "closed":
                consequence = "The issue was moved to Done on the board but wasn't closed on GitHub."
            else:
                consequence = "The issue was reopened on the board but is still closed on GitHub."
            self._report(e, f"Failed to {verb} GitHub issue: {e}\n\n{consequence}")
            return False
        logger.info("Issue #%d %s", issue_number, "closed" if state == "closed" else "reopened")
        return True

    def update(
        self, issue_number: int, title: str | None = None, body: str | None = None
    ) -> RemoteIssueRecord | None:
        """Edit the title and/or body of an issue."""
        fields = {key: value for key, value in (("title", title), ("body", body)) if value is not None}
        if not fields:
            return None
        if not self._require_auth("update issue"):
            return None
        ctx = self._context()
        try:
            data = self._client.update_issue(ctx.owner, ctx.repo, issue_number, **fields)
        except GitHubClientError as e:
            logger.error("Failed to update issue #%d: %s", issue_number, e)
            self._report(e, f"Failed to update GitHub issue: {e}")
            return None
        return RemoteIssueRecord.from_api(data)

    def archive(
        self,
        issue_number: int,
        card: Card,
        board: LiveBoard,
        on_removed: Callable[[], None] | None = None,
    ) -> bool:
        """Tag the issue ``archive`` and remove its card.

        The card is removed whatever the remote outcome: archiving is local
        housekeeping.

        Returns:
            True if the remote label was added.
        """
        success = False
        if self._require_auth("archive issue"):
            ctx = self._context()
            try:
                self._client.add_issue_labels(
                    ctx.owner, ctx.repo, issue_number, [self.mapper.archive_label]
                )
                success = True
                logger.info("Archived issue #%d", issue_number)
            except GitHubClientError as e:
                logger.error("Failed to archive issue #%d: %s", issue_number, e)
                self._report(
                    e,
                    f"Failed to add archive label to GitHub issue: {e}\n\n"
                    "The task will be removed from the board anyway.",
                )

        board.remove(card)
        if on_removed is not None:
            on_removed()
        return success

    # --- Reads ---

    def load(self) -> IssueSet | None:
        """Fetch open and closed issues, minus archived ones.

        Returns None if either list could not be fetched. Load failures are
        logged only; the board keeps whatever it shows.
        """
        ctx = self._context()
        try:
            open_raw = self._client.list_issues(ctx.owner, ctx.repo, "open")
            closed_raw = self._client.list_issues(ctx.owner, ctx.repo, "closed")
        except GitHubClientError as e:
            logger.error("Failed to load GitHub issues for %s: %s", ctx.full_name, e)
            return None

        issues = IssueSet(
            open=self._visible(open_raw),
            closed=self._visible(closed_raw),
        )
        logger.info(
            "Found %d open and %d closed GitHub issues (archived issues filtered out)",
            len(issues.open),
            len(issues.closed),
        )
        return issues

    def _visible(self, raw: list[dict]) -> list[RemoteIssueRecord]:
        records = [RemoteIssueRecord.from_api(item) for item in raw]
        return [record for record in records if not self.mapper.is_archived(record.labels)]

    def place(self, issues: IssueSet) -> dict[str, list[RemoteIssueRecord]]:
        """Target column for every issue.

        Open issues follow their status label; closed issues always go to
        the done column.
        """
        placement: dict[str, list[RemoteIssueRecord]] = {
            column_id: [] for column_id in self.mapper.config.column_ids
        }
        for issue in issues.open:
            placement[self.mapper.labels_to_column(issue.labels)].append(issue)
        placement[self.mapper.done_column].extend(issues.closed)
        return placement
