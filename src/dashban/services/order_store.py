"""Persistence of the visual card order per column."""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import ValidationError

from ..models import CollapseStates, ColumnOrder, LiveBoard, RepoContext
from ..models.dashban_config import BoardConfig
from ..repositories import StorageError, StorageProtocol

logger = logging.getLogger(__name__)


class OrderStore:
    """
    Saves and loads card identity lists per column.

    Values live under ``cardOrder_<owner>_<repo>`` so each repository keeps
    its own layout. Storage problems never propagate: a failed write is
    logged and skipped, unreadable data reads as "no saved order".
    """

    KEY_PREFIX = "cardOrder"

    def __init__(
        self,
        storage: StorageProtocol,
        context: Callable[[], RepoContext],
        config: BoardConfig | None = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            storage: Key/value backend
            context: Returns the current repository (read on every call)
            config: Board configuration naming the known columns
        """
        self._storage = storage
        self._context = context
        self.config = config or BoardConfig.default()

    def storage_key(self) -> str:
        return f"{self.KEY_PREFIX}_{self._context().key_suffix}"

    def snapshot(self, board: LiveBoard) -> ColumnOrder:
        """Current identity order of every known column on the board.

        Cards without any identity get a generated id assigned here.
        """
        columns: dict[str, list[str]] = {}
        for column_id in self.config.column_ids:
            if not board.has_column(column_id):
                continue
            ids: list[str] = []
            for card in board.cards(column_id):
                identity = card.identity(assign=True)
                if identity is not None:
                    ids.append(identity.value)
            columns[column_id] = ids
        return ColumnOrder(columns)

    def save(self, board: LiveBoard) -> None:
        """Persist the board's current order. Never raises on storage failure."""
        order = self.snapshot(board)
        self._write(order)

    def load(self) -> ColumnOrder | None:
        """Saved order for the current repository, or None."""
        key = self.storage_key()
        try:
            raw = self._storage.get_item(key)
        except (StorageError, OSError) as e:
            logger.warning("Failed to load card order: %s", e)
            return None
        if not raw:
            return None
        try:
            return ColumnOrder.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding unreadable card order in %s: %s", key, e)
            return None

    def clear(self) -> None:
        try:
            self._storage.remove_item(self.storage_key())
        except StorageError as e:
            logger.warning("Failed to clear card order: %s", e)

    def cleanup_closed_issues(self, board: LiveBoard) -> bool:
        """Drop closed issues from every saved column except done.

        Returns:
            True if the saved order changed.
        """
        order = self.load()
        if order is None:
            return False

        closed = {
            str(card.issue_number)
            for _, card in board.iter_cards()
            if card.is_closed_issue
        }
        if not closed:
            return False

        changed = False
        done = self.config.done_column
        for column_id, ids in order.columns.items():
            if column_id == done:
                continue
            kept = [card_id for card_id in ids if card_id not in closed]
            if len(kept) != len(ids):
                order.columns[column_id] = kept
                changed = True

        if changed:
            logger.debug("Removed closed issues from saved order")
            self._write(order)
        return changed

    def _write(self, order: ColumnOrder) -> None:
        key = self.storage_key()
        try:
            self._storage.set_item(key, order.model_dump_json())
        except (StorageError, OSError, ValueError) as e:
            logger.warning("Failed to save card order to %s: %s", key, e)
            return
        logger.debug("Saved card order %s: %s", key, order.columns)


class CollapseStateStore:
    """Collapsed/expanded flag per column, under ``columnCollapseStates_<owner>_<repo>``.

    With nothing saved, the done column starts collapsed.
    """

    KEY_PREFIX = "columnCollapseStates"

    def __init__(
        self,
        storage: StorageProtocol,
        context: Callable[[], RepoContext],
        config: BoardConfig | None = None,
    ) -> None:
        self._storage = storage
        self._context = context
        self.config = config or BoardConfig.default()

    def storage_key(self) -> str:
        return f"{self.KEY_PREFIX}_{self._context().key_suffix}"

    def defaults(self) -> dict[str, bool]:
        done = self.config.done_column
        return {column_id: column_id == done for column_id in self.config.column_ids}

    def load(self) -> dict[str, bool]:
        """Saved flags, or the defaults when nothing valid is saved.

        Invalid saved data is removed.
        """
        states = self.defaults()
        key = self.storage_key()
        raw = self._storage.get_item(key)
        if not raw:
            return states
        try:
            saved = CollapseStates.model_validate_json(raw)
        except ValidationError as e:
            logger.error("Error loading collapse states: %s", e)
            try:
                self._storage.remove_item(key)
            except StorageError:
                logger.warning("Failed to remove invalid collapse states %s", key)
            return states
        return {column_id: saved.is_collapsed(column_id) for column_id in self.config.column_ids}

    def save(self, states: dict[str, bool]) -> None:
        data = {
            column_id: bool(states.get(column_id, False)) for column_id in self.config.column_ids
        }
        try:
            self._storage.set_item(self.storage_key(), CollapseStates(data).model_dump_json())
        except StorageError as e:
            logger.warning("Failed to save collapse states: %s", e)

    def toggle(self, column_id: str) -> bool:
        """Flip a column and persist. Returns the new collapsed flag."""
        states = self.load()
        states[column_id] = not states.get(column_id, False)
        self.save(states)
        return states[column_id]
