"""Issue state commands: close, reopen, archive."""

import logging

from ..services import BoardService
from .output import error, info, success

logger = logging.getLogger(__name__)


def _require_token(service: BoardService) -> bool:
    if service.client.is_authenticated:
        return True
    error("A GitHub token is required to modify issues")
    info("Set GITHUB_TOKEN environment variable or run 'gh auth login'")
    return False


def run_close(service: BoardService, issue_number: int) -> int:
    if not _require_token(service):
        return 1
    service.load_board()
    if not service.close_issue(issue_number):
        return 1
    success(f"Closed issue #{issue_number}")
    return 0


def run_reopen(service: BoardService, issue_number: int) -> int:
    if not _require_token(service):
        return 1
    service.load_board()
    if not service.reopen_issue(issue_number):
        return 1
    success(f"Reopened issue #{issue_number}")
    return 0


def run_archive(service: BoardService, issue_number: int) -> int:
    """Label an issue ``archive`` so it no longer shows on the board.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    if not _require_token(service):
        return 1
    service.load_board()
    card = service.board.find_issue(issue_number)
    if card is None:
        error(f"Issue #{issue_number} is not on the board")
        return 1
    if not service.archive_card(card):
        return 1
    success(f"Archived issue #{issue_number}")
    return 0
