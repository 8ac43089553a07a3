"""Service for board state management."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..github.client import GitHubClient, resolve_token
from ..models import ISSUE_CLOSED, ISSUE_OPEN, Card, LiveBoard, RemoteIssueRecord, RepoContext
from ..models.dashban_config import BoardConfig
from ..repositories import FileStorage, StorageProtocol
from ..utils import generate_card_id
from .config_service import ConfigService
from .issue_sync import RemoteIssueSync
from .label_installer import LabelInstaller
from .label_mapper import LabelStateMapper
from .notifier import LoggingNotifier, Notifier
from .order_reconciler import OrderReconciler
from .order_store import CollapseStateStore, OrderStore
from .rate_limiter import RateLimiter, RateLimitProbe
from .repo_context import RepoContextService

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)


def card_for_issue(issue: RemoteIssueRecord) -> Card:
    return Card.for_issue(issue.number, issue.state, issue.title, issue.labels)


class BoardService:
    """Service for board state management.

    Owns the live board and turns user events (load, drag end, archive,
    create, close/reopen) into local changes followed by remote calls and an
    order save. Local changes are applied first and kept whatever the remote
    outcome.
    """

    def __init__(
        self,
        sync: RemoteIssueSync,
        order_store: OrderStore,
        collapse_store: CollapseStateStore,
        repos: RepoContextService,
        rate_limiter: RateLimiter,
        config: BoardConfig | None = None,
        labels: LabelInstaller | None = None,
        probe_interval: float = 300.0,
    ) -> None:
        self.config = config or BoardConfig.default()
        self.sync = sync
        self.order_store = order_store
        self.collapse_store = collapse_store
        self.repos = repos
        self.rate_limiter = rate_limiter
        self.labels = labels
        self.probe_interval = probe_interval
        self.reconciler = OrderReconciler(self.config)
        self.board = LiveBoard(self.config.column_ids)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        notifier: Notifier | None = None,
        storage: StorageProtocol | None = None,
        client: GitHubClient | None = None,
    ) -> BoardService:
        """Build the whole object graph once.

        Args:
            settings: Application settings
            notifier: User-facing messages (default: log only)
            storage: Persisted state backend (default: files under the storage dir)
            client: Pre-built client (default: from settings and environment)
        """
        notifier = notifier or LoggingNotifier()
        config_service = ConfigService(settings.project_root)
        dashban_config = config_service.get_config()
        board_config = dashban_config.board

        if storage is None:
            storage = FileStorage(settings.resolved_storage_dir)

        override = None
        if settings.owner and settings.repo:
            override = RepoContext(owner=settings.owner, repo=settings.repo)
        default = RepoContext(
            owner=dashban_config.repository.owner, repo=dashban_config.repository.repo
        )
        repos = RepoContextService(storage, default, override)

        if client is None:
            limiter = RateLimiter(notifier, settings.rate_limit_warning_threshold)
            token = settings.github_token
            if token is None:
                token = resolve_token()
            client = GitHubClient(token, settings.api_base_url, limiter)
        elif client.rate_limiter is not None:
            limiter = client.rate_limiter
        else:
            limiter = RateLimiter(
                notifier, settings.rate_limit_warning_threshold, client.is_authenticated
            )
            client.rate_limiter = limiter

        mapper = LabelStateMapper(board_config)
        sync = RemoteIssueSync(client, repos.current, notifier, mapper)
        return cls(
            sync=sync,
            order_store=OrderStore(storage, repos.current, board_config),
            collapse_store=CollapseStateStore(storage, repos.current, board_config),
            repos=repos,
            rate_limiter=limiter,
            config=board_config,
            labels=LabelInstaller(client, repos.current, dashban_config.required_labels),
            probe_interval=settings.rate_limit_probe_interval,
        )

    @property
    def client(self) -> GitHubClient:
        return self.sync.client

    @property
    def mapper(self) -> LabelStateMapper:
        return self.sync.mapper

    def probe(self, interval: float | None = None) -> RateLimitProbe:
        """Background rate limit probe bound to this board's client. Not started."""
        if interval is None:
            interval = self.probe_interval
        return RateLimitProbe(self.rate_limiter, self.client, interval)

    # --- Load ---

    def load_board(self) -> LiveBoard:
        """Fetch issues, place them, then restore the saved order.

        Local and special cards stay on the board. If the fetch fails the
        issue cards already shown are kept.
        """
        for column_id in self.board.column_ids:
            self.board.insert(column_id, 0, Card.placeholder())

        issues = self.sync.load()
        if issues is not None:
            self.board.remove_issue_cards()
            for column_id, records in self.sync.place(issues).items():
                for issue in records:
                    self.board.append(column_id, card_for_issue(issue))

        self.board.clear_skeletons()
        self.order_store.cleanup_closed_issues(self.board)
        self.reconciler.apply(self.board, self.order_store.load())
        logger.info("Board loaded for %s: %s", self.repos.current(), self.column_counts())
        return self.board

    def column_counts(self) -> dict[str, int]:
        return self.board.counts()

    def save_order(self) -> None:
        self.order_store.save(self.board)

    # --- Card events ---

    def move_card(self, card: Card, to_column: str, index: int | None = None) -> Card:
        """Handle a drag end: place the card, sync the issue, save the order."""
        from_column = self.board.column_of(card)
        if index is None:
            self.board.append(to_column, card)
        else:
            self.board.insert(to_column, index, card)

        if card.is_issue and from_column != to_column:
            logger.info("Issue #%d moved from %s to %s", card.issue_number, from_column, to_column)
            self.sync.update_labels_for_column_move(card.issue_number, to_column)
            card.labels = self.mapper.apply_column(card.labels, to_column)
            if to_column == self.mapper.done_column and not card.is_closed_issue:
                card.issue_state = ISSUE_CLOSED
                self.sync.close(card.issue_number)

        self.save_order()
        return card

    def close_issue(self, issue_number: int) -> bool:
        """Close from the issue view: the card moves to the done column."""
        card = self.board.find_issue(issue_number)
        if card is not None:
            card.issue_state = ISSUE_CLOSED
            self.board.append(self.mapper.done_column, card)
            self.save_order()
        return self.sync.close(issue_number)

    def reopen_issue(self, issue_number: int) -> bool:
        """Reopen from the issue view: the card moves to the baseline column."""
        card = self.board.find_issue(issue_number)
        if card is not None:
            card.issue_state = ISSUE_OPEN
            self.board.append(self.mapper.baseline_column, card)
            self.save_order()
        return self.sync.reopen(issue_number)

    def archive_card(self, card: Card) -> bool:
        """Archive the card's issue and drop the card. Local cards are just removed."""
        if not card.is_issue:
            self.board.remove(card)
            self.save_order()
            return False
        success = self.sync.archive(card.issue_number, card, self.board)
        self.save_order()
        return success

    def create_card(
        self,
        title: str,
        description: str = "",
        column: str | None = None,
        labels: list[str] | None = None,
    ) -> Card | None:
        """Create an issue and its card.

        The new issue carries the column's status label so a reload puts it
        back in the same column. When the issue cannot be created remotely a
        local task card is created instead.

        Raises:
            ValueError: If the title is blank or the column unknown
        """
        if not title or not title.strip():
            raise ValueError("Please enter an issue title")
        column = column or self.mapper.baseline_column
        if not self.config.is_valid_column(column):
            raise ValueError(f"Unknown column: {column}")

        issue_labels = self.mapper.apply_column(labels or [], column)
        issue = self.sync.create(title.strip(), description, issue_labels)
        if issue is not None:
            card = card_for_issue(issue)
        else:
            card = Card.for_task(generate_card_id(), title.strip())
        self.board.append(column, card)
        self.save_order()
        return card

    # --- Columns and repositories ---

    def toggle_column(self, column_id: str) -> bool:
        return self.collapse_store.toggle(column_id)

    def collapse_states(self) -> dict[str, bool]:
        return self.collapse_store.load()

    def switch_repo(self, context: RepoContext) -> LiveBoard:
        """Show another repository. The rate limiter budget carries over."""
        self.repos.switch(context)
        self.board = LiveBoard(self.config.column_ids)
        return self.load_board()
