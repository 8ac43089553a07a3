"""Utilities for datetime handling."""

from datetime import datetime


def format_reset_time(epoch_seconds: int) -> str:
    """Render an epoch reset time as a local wall-clock time."""
    return datetime.fromtimestamp(epoch_seconds).astimezone().strftime("%H:%M:%S")
