"""Utility functions."""

from .datetime import format_reset_time
from .ids import generate_card_id

__all__ = [
    "format_reset_time",
    "generate_card_id",
]
