"""
Opaque field id generation.
"""

import random
from typing import Collection
import logging

logger = logging.getLogger(__name__)

BLOCK_BASE = 100000
BLOCK_SPAN = 99999
MAX_ATTEMPTS = 100


def _random_block() -> str:
    return str(BLOCK_BASE + random.randrange(BLOCK_SPAN))


def generate_field_id(existing_ids: Collection[str] = (), prefix: str = "new", groups: int = 5) -> str:
    """
    Generate a field id that is not in ``existing_ids``.

    Ids look like ``new-123456-104211-...``: the prefix followed by ``groups``
    random six digit blocks. Callers should treat the result as opaque.

    Args:
        existing_ids: Ids already issued in this session
        prefix: Fixed prefix of the token
        groups: Number of random numeric blocks

    Returns:
        A token not present in existing_ids

    Raises:
        RuntimeError: If no free token is found after MAX_ATTEMPTS tries
    """
    for attempt in range(MAX_ATTEMPTS):
        candidate = "-".join([prefix] + [_random_block() for _ in range(groups)])
        if candidate not in existing_ids:
            return candidate
        logger.debug(f"Generated id {candidate} collides with an existing id (attempt {attempt + 1})")

    raise RuntimeError(f"Could not generate a unique field id after {MAX_ATTEMPTS} attempts")
