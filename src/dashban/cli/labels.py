"""Labels command: check and install the board's label vocabulary."""

import logging

from ..github.client import GitHubAuthError
from ..services import BoardService
from .output import error, header, info, success

logger = logging.getLogger(__name__)


def run_labels(service: BoardService, install: bool = False) -> int:
    """Report missing labels and optionally create them.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    installer = service.labels
    if installer is None:
        error("Label installer not configured")
        return 1
    if not service.client.is_authenticated:
        error("A GitHub token is required to check labels")
        info("Set GITHUB_TOKEN environment variable or run 'gh auth login'")
        return 1

    header(f"Checking labels in {service.repos.current().full_name}...")
    report = installer.find_missing()
    if not report.missing:
        success(f"All {report.total} required labels are present")
        return 0

    info(f"{report.existing}/{report.total} labels present, {report.missing_count} missing:")
    for label in report.missing:
        print(f"  {label.name} - {label.description}")

    if not install:
        info("Run 'dashban labels --install' to create them")
        return 0

    try:
        result = installer.install_missing(report.missing)
    except GitHubAuthError as e:
        error(str(e))
        return 1

    for name in result.success:
        success(f"Created label '{name}'")
    for name, reason in result.failed:
        error(f"Failed to create label '{name}': {reason}")
    return 1 if result.failed else 0
