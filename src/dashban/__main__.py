"""CLI entry point for dashban."""

import argparse
from pathlib import Path

from .config import Settings
from .logging import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="dashban",
        description="Kanban board over GitHub issues",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        default=None,
        help="Path to project root containing dashban.yml (default: current directory)",
    )
    parser.add_argument(
        "--repo",
        default=None,
        metavar="OWNER/REPO",
        help="Repository to use instead of the saved current repository",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("board", help="Show the board (default)")

    move = sub.add_parser("move", help="Move an issue to another column")
    move.add_argument("issue", type=int)
    move.add_argument("column")
    move.add_argument("--index", type=int, default=None, help="Position in the column")

    for name, help_text in (
        ("close", "Close an issue (card moves to done)"),
        ("reopen", "Reopen an issue (card moves to backlog)"),
        ("archive", "Archive an issue (hidden from the board)"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("issue", type=int)

    create = sub.add_parser("create", help="Create an issue")
    create.add_argument("title")
    create.add_argument("--body", default="")
    create.add_argument("--column", default=None)
    create.add_argument("--label", action="append", default=[], dest="labels")

    sub.add_parser("rate-limit", help="Show the GitHub API request budget")

    labels = sub.add_parser("labels", help="Check the required labels")
    labels.add_argument("--install", action="store_true", help="Create missing labels")

    repo = sub.add_parser("repo", help="Show or switch the current repository")
    repo.add_argument("target", nargs="?", default=None, metavar="OWNER/REPO")
    repo.add_argument("--list", action="store_true", dest="list_saved", help="List saved repositories")
    repo.add_argument("--remove", action="store_true", help="Forget a saved repository")

    return parser.parse_args(argv)


def run_command(args: argparse.Namespace, settings: Settings) -> int:
    """Dispatch a parsed command. Returns the exit code."""
    # Import here to avoid loading the service stack for --help/--version
    from .cli.board import run_board, run_create, run_move
    from .cli.issues import run_archive, run_close, run_reopen
    from .cli.labels import run_labels
    from .cli.output import ConsoleNotifier, error
    from .cli.repo import run_rate_limit, run_repo
    from .services import BoardService

    service = BoardService.from_settings(settings, notifier=ConsoleNotifier())
    try:
        command = args.command or "board"
        if command == "board":
            return run_board(service)
        if command == "move":
            return run_move(service, args.issue, args.column, args.index)
        if command == "close":
            return run_close(service, args.issue)
        if command == "reopen":
            return run_reopen(service, args.issue)
        if command == "archive":
            return run_archive(service, args.issue)
        if command == "create":
            return run_create(service, args.title, args.body, args.column, args.labels)
        if command == "rate-limit":
            return run_rate_limit(service)
        if command == "labels":
            return run_labels(service, args.install)
        if command == "repo":
            return run_repo(service, args.target, args.list_saved, args.remove)
        error(f"Unknown command: {command}")
        return 1
    finally:
        service.client.close()


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    # Build settings from CLI args
    settings_kwargs: dict = {}
    if args.project_root:
        settings_kwargs["project_root"] = args.project_root
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose
    if args.log_file:
        settings_kwargs["log_file"] = args.log_file
    if args.repo:
        owner, _, repo = args.repo.partition("/")
        if not owner or not repo:
            raise SystemExit(f"Expected OWNER/REPO, got: {args.repo}")
        settings_kwargs["owner"] = owner
        settings_kwargs["repo"] = repo

    settings = Settings(**settings_kwargs)
    setup_logging(settings.verbose, settings.log_file)

    raise SystemExit(run_command(args, settings))


if __name__ == "__main__":
    main()
