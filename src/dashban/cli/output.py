"""Colorful CLI output helpers."""

import sys

from ..services.notifier import BannerLevel

# ANSI color codes
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
RED = "\033[31m"
DIM = "\033[2m"
RESET = "\033[0m"
CHECK = "\u2713"  # ✓
BULLET = "\u2022"  # •
CROSS = "\u2717"  # ✗
WARN = "!"


def _supports_color() -> bool:
    """Check if terminal supports color output."""
    if not hasattr(sys.stdout, "isatty") or not sys.stdout.isatty():
        return False
    return True


def _colorize(text: str, color: str) -> str:
    """Apply color to text if terminal supports it."""
    if _supports_color():
        return f"{color}{text}{RESET}"
    return text


def success(message: str) -> None:
    """Print success message with green checkmark."""
    check = _colorize(CHECK, GREEN)
    print(f"{check} {message}")


def info(message: str) -> None:
    """Print info message with yellow bullet."""
    bullet = _colorize(BULLET, YELLOW)
    print(f"{bullet} {message}")


def header(message: str) -> None:
    """Print header message in blue."""
    print(_colorize(message, BLUE))


def error(message: str) -> None:
    """Print error message with red cross."""
    cross = _colorize(CROSS, RED)
    print(f"{cross} {message}")


def warning(message: str) -> None:
    mark = _colorize(WARN, YELLOW)
    print(f"{mark} {message}")


def dim(message: str) -> None:
    print(_colorize(message, DIM))


class ConsoleNotifier:
    """Notifier printing alerts and banners to the terminal."""

    def __init__(self) -> None:
        self.banner_shown = False

    def alert(self, message: str) -> None:
        lines = message.splitlines() or [""]
        error(lines[0])
        for line in lines[1:]:
            if line:
                print(f"  {line}")

    def show_banner(self, level: BannerLevel, message: str, details: str) -> None:
        self.banner_shown = True
        if level is BannerLevel.ERROR:
            error(f"{message} ({details})")
        else:
            warning(f"{message} ({details})")

    def hide_banner(self) -> None:
        if self.banner_shown:
            info("GitHub API rate limit back to normal")
        self.banner_shown = False
