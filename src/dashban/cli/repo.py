"""Repository selection and rate limit status commands."""

import logging

from ..models import RateLimitStatus, RepoContext
from ..services import BoardService, RepoContextService
from ..utils import format_reset_time
from .output import error, header, info, success, warning

logger = logging.getLogger(__name__)


def run_repo(
    service: BoardService,
    target: str | None = None,
    list_saved: bool = False,
    remove: bool = False,
) -> int:
    """Show, switch, list or forget repositories.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    repos = service.repos
    if list_saved:
        current = repos.current()
        saved = repos.saved()
        if not saved:
            info("No saved repositories")
        for ctx in saved:
            marker = "*" if ctx == current else " "
            print(f"{marker} {ctx.full_name}")
        return 0

    if target is None:
        info(f"Current repository: {repos.current().full_name}")
        return 0

    try:
        context = RepoContext.parse(target)
    except ValueError as e:
        error(str(e))
        return 1

    if remove:
        if repos.remove(context):
            success(f"Removed {context.full_name}")
            return 0
        error(f"{context.full_name} is not saved")
        return 1

    header(f"Validating {context.full_name}...")
    result = RepoContextService.validate(service.client, context)
    if not result.valid:
        error(result.error or "Repository not accessible")
        return 1

    repos.switch(context)
    visibility = "private" if result.is_private else "public"
    success(f"Switched to {context.full_name} ({visibility}, {result.access_level})")
    info(f"{result.issue_count} open issues")
    return 0


def run_rate_limit(service: BoardService) -> int:
    """Probe and print the API request budget."""
    state = service.rate_limiter.probe(service.client)
    if state is None or state.remaining is None:
        error("Could not fetch rate limit status")
        return 1

    status = service.rate_limiter.status
    line = f"{state.remaining}/{state.limit} requests remaining"
    if state.reset_at is not None:
        line += f", resets at {format_reset_time(state.reset_at)}"

    if status is RateLimitStatus.BLOCKED:
        error(line)
        return 1
    if status is RateLimitStatus.WARNING:
        warning(line)
    else:
        success(line)
    if not service.client.is_authenticated:
        info("Unauthenticated: 60 requests/hour. Set GITHUB_TOKEN for 5,000.")
    return 0
