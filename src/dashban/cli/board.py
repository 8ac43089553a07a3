"""Board commands: show the board, move cards, create issues."""

import logging

from ..models import Card
from ..services import BoardService
from .output import dim, error, header, info, success

logger = logging.getLogger(__name__)


def _card_line(card: Card) -> str:
    if card.is_issue:
        state = " (closed)" if card.is_closed_issue else ""
        labels = f" [{', '.join(card.labels)}]" if card.labels else ""
        return f"#{card.issue_number} {card.title}{state}{labels}"
    identity = card.identity()
    return f"{identity.value if identity else '?'} {card.title}".rstrip()


def print_board(service: BoardService) -> None:
    collapsed = service.collapse_states()
    counts = service.column_counts()
    for column in service.config.columns:
        header(f"{column.title} ({counts.get(column.id, 0)})")
        if collapsed.get(column.id):
            dim("  (collapsed)")
            continue
        for card in service.board.cards(column.id):
            print(f"  {_card_line(card)}")


def run_board(service: BoardService) -> int:
    """Load and print the board.

    Returns:
        Exit code (0 for success)
    """
    if not service.client.is_authenticated:
        info("Not authenticated - showing public issues read-only")
    service.load_board()
    header(f"{service.repos.current().full_name}")
    print_board(service)
    return 0


def run_move(service: BoardService, issue_number: int, column: str, index: int | None = None) -> int:
    """Move an issue card to another column, as a drag would.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    if not service.config.is_valid_column(column):
        error(f"Unknown column: {column}")
        info(f"Columns: {', '.join(service.config.column_ids)}")
        return 1

    service.load_board()
    card = service.board.find_issue(issue_number)
    if card is None:
        error(f"Issue #{issue_number} is not on the board")
        return 1

    from_column = service.board.column_of(card)
    service.move_card(card, column, index)
    success(f"Moved #{issue_number} from {from_column} to {column}")
    return 0


def run_create(
    service: BoardService,
    title: str,
    body: str = "",
    column: str | None = None,
    labels: list[str] | None = None,
) -> int:
    """Create an issue and place its card.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    if not service.client.is_authenticated:
        error("A GitHub token is required to create issues")
        info("Set GITHUB_TOKEN environment variable or run 'gh auth login'")
        return 1

    service.load_board()
    try:
        card = service.create_card(title, body, column, labels)
    except ValueError as e:
        error(str(e))
        return 1

    if card is None or not card.is_issue:
        info("Issue was not created on GitHub; added a local card instead")
        return 1
    success(f"Created issue #{card.issue_number}: {card.title}")
    return 0
