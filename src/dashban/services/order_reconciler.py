"""Merge of a saved card order into the live board."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..models import Card, ColumnOrder, LiveBoard
from ..models.dashban_config import BoardConfig

logger = logging.getLogger(__name__)


def _identity_map(cards: list[Card]) -> dict[str, Card]:
    mapping: dict[str, Card] = {}
    for card in cards:
        identity = card.identity()
        if identity is not None:
            mapping[identity.value] = card
    return mapping


class OrderReconciler:
    """Reorders board columns to follow a saved ColumnOrder.

    The result depends only on the saved order and the cards currently on
    the board, so applying the same order twice gives the same layout.
    Saved ids that match no card are dropped; cards the order does not
    mention keep their relative order after the ordered ones. Closed issues
    are never pulled out of the done column.

    Not re-entrant: run one pass at a time.
    """

    def __init__(
        self,
        config: BoardConfig | None = None,
        on_applied: Callable[[], None] | None = None,
    ) -> None:
        """
        Args:
            config: Board configuration (column order, done column)
            on_applied: Called after a pass that touched at least one column
        """
        self.config = config or BoardConfig.default()
        self._on_applied = on_applied

    def apply(self, board: LiveBoard, order: ColumnOrder | None) -> None:
        if order is None:
            return

        # Built once, before any column is rewritten, so a card can be
        # claimed by a column other than the one it is rendered in
        global_map: dict[str, Card] = {}
        for column_id in self.config.column_ids:
            if board.has_column(column_id):
                global_map.update(_identity_map(board.cards(column_id)))

        touched = 0
        for column_id in self.config.column_ids:
            saved_ids = order.get(column_id)
            if not board.has_column(column_id) or not saved_ids:
                continue
            self._apply_column(board, column_id, saved_ids, global_map)
            touched += 1

        logger.debug("Applied saved card order to %d columns", touched)
        if touched and self._on_applied is not None:
            self._on_applied()

    def _apply_column(
        self,
        board: LiveBoard,
        column_id: str,
        saved_ids: list[str],
        global_map: dict[str, Card],
    ) -> None:
        current = board.cards(column_id)
        local_map = _identity_map(current)
        is_done = column_id == self.config.done_column

        ordered: list[Card] = []
        placed: set[int] = set()
        for card_id in saved_ids:
            card = local_map.get(card_id) or global_map.get(card_id)
            if card is None or id(card) in placed:
                continue
            if card.is_closed_issue and not is_done:
                # Closed issues stay where they are
                continue
            ordered.append(card)
            placed.add(id(card))

        ordered.extend(card for card in current if id(card) not in placed)
        board.replace_cards(column_id, ordered)
