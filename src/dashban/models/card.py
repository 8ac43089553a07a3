"""Card identity and live board models."""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum

from pydantic import BaseModel, Field

from ..utils.ids import generate_card_id

ISSUE_OPEN = "open"
ISSUE_CLOSED = "closed"


class CardKind(str, Enum):
    """Which attribute a card identity was derived from."""

    SPECIAL = "special"  # status-card, about-card
    ISSUE = "issue"  # remote issue number
    TASK = "task"  # client-generated local task id
    GENERATED = "generated"  # fallback card-<millis>-<random>


class CardIdentity(BaseModel):
    """Tagged identity of a card, serialised as its bare value."""

    kind: CardKind
    value: str = Field(..., min_length=1)

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return self.value


class Card(BaseModel):
    """A card element on the live board.

    Identity attributes are set when the card is created. ``identity()``
    applies the precedence special > issue > task > generated.
    """

    issue_number: int | None = None
    issue_state: str | None = None  # "open" / "closed", issue cards only
    task_id: str | None = None
    card_id: str | None = None
    special_id: str | None = None
    title: str = ""
    labels: list[str] = Field(default_factory=list)
    skeleton: bool = False

    @classmethod
    def for_issue(
        cls, number: int, state: str = ISSUE_OPEN, title: str = "", labels: list[str] | None = None
    ) -> Card:
        """Create a card mirroring a remote issue."""
        return cls(issue_number=number, issue_state=state, title=title, labels=labels or [])

    @classmethod
    def for_task(cls, task_id: str, title: str = "") -> Card:
        """Create a card for a local task."""
        return cls(task_id=task_id, title=title)

    @classmethod
    def special(cls, special_id: str, title: str = "") -> Card:
        """Create a special card (status card, about card)."""
        return cls(special_id=special_id, title=title)

    @classmethod
    def placeholder(cls) -> Card:
        """Create a loading skeleton."""
        return cls(skeleton=True)

    @property
    def is_issue(self) -> bool:
        return self.issue_number is not None

    @property
    def is_closed_issue(self) -> bool:
        return self.is_issue and self.issue_state == ISSUE_CLOSED

    def identity(self, assign: bool = False) -> CardIdentity | None:
        """Return the card identity.

        Args:
            assign: Give the card a generated ``card_id`` when it has no
                other identifying attribute. The id then sticks to the card.
        """
        if self.special_id:
            return CardIdentity(kind=CardKind.SPECIAL, value=self.special_id)
        if self.issue_number is not None:
            return CardIdentity(kind=CardKind.ISSUE, value=str(self.issue_number))
        if self.task_id:
            return CardIdentity(kind=CardKind.TASK, value=self.task_id)
        if self.card_id is None and assign:
            self.card_id = generate_card_id()
        if self.card_id:
            return CardIdentity(kind=CardKind.GENERATED, value=self.card_id)
        return None


class LiveBoard:
    """In-memory stand-in for the rendered board.

    Columns keep their cards in display order. Cards are compared by
    object identity, like elements in a document tree.
    """

    def __init__(self, column_ids: list[str]) -> None:
        self._columns: dict[str, list[Card]] = {column_id: [] for column_id in column_ids}

    @property
    def column_ids(self) -> list[str]:
        return list(self._columns)

    def has_column(self, column_id: str) -> bool:
        return column_id in self._columns

    def children(self, column_id: str) -> list[Card]:
        """All cards of a column, skeletons included."""
        return list(self._columns.get(column_id, []))

    def cards(self, column_id: str) -> list[Card]:
        """Visible (non-skeleton) cards of a column, in order."""
        return [card for card in self._columns.get(column_id, []) if not card.skeleton]

    def iter_cards(self) -> Iterator[tuple[str, Card]]:
        """Yield (column_id, card) for every visible card."""
        for column_id in self._columns:
            for card in self.cards(column_id):
                yield column_id, card

    def append(self, column_id: str, card: Card) -> None:
        """Append a card to a column, detaching it from wherever it was."""
        self.remove(card)
        self._columns[column_id].append(card)

    def insert(self, column_id: str, index: int, card: Card) -> None:
        self.remove(card)
        self._columns[column_id].insert(index, card)

    def remove(self, card: Card) -> bool:
        """Detach a card. Returns False when it was not on the board."""
        for column in self._columns.values():
            for i, existing in enumerate(column):
                if existing is card:
                    del column[i]
                    return True
        return False

    def column_of(self, card: Card) -> str | None:
        for column_id, column in self._columns.items():
            if any(existing is card for existing in column):
                return column_id
        return None

    def find_issue(self, issue_number: int) -> Card | None:
        for _, card in self.iter_cards():
            if card.issue_number == issue_number:
                return card
        return None

    def replace_cards(self, column_id: str, cards: list[Card]) -> None:
        """Replace the visible cards of a column in one pass.

        Skeletons stay at the head of the column. Cards taken from other
        columns are detached from them.
        """
        incoming = {id(card) for card in cards}
        for other_id, column in self._columns.items():
            if other_id != column_id:
                column[:] = [card for card in column if id(card) not in incoming]
        skeletons = [card for card in self._columns[column_id] if card.skeleton]
        self._columns[column_id] = skeletons + list(cards)

    def clear_skeletons(self) -> None:
        for column_id, column in self._columns.items():
            self._columns[column_id] = [card for card in column if not card.skeleton]

    def remove_issue_cards(self) -> None:
        """Drop every issue card, keeping local and special cards."""
        for column_id, column in self._columns.items():
            self._columns[column_id] = [card for card in column if not card.is_issue]

    def counts(self) -> dict[str, int]:
        """Number of visible cards per column."""
        return {column_id: len(self.cards(column_id)) for column_id in self._columns}

    def order(self) -> dict[str, list[str]]:
        """Identity values per column, for display and assertions."""
        result: dict[str, list[str]] = {}
        for column_id in self._columns:
            values = []
            for card in self.cards(column_id):
                identity = card.identity()
                values.append(identity.value if identity else "?")
            result[column_id] = values
        return result
