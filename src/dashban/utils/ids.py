"""Card id generation."""

import random
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase


def generate_card_id() -> str:
    """Fallback card id: ``card-<millis>-<9 base36 chars>``."""
    millis = int(time.time() * 1000)
    suffix = "".join(random.choices(_ALPHABET, k=9))
    return f"card-{millis}-{suffix}"
