"""
Identifier generation.
"""

import uuid


def new_id() -> str:
    """Return a fresh random identifier (canonical UUID4 string)"""
    return str(uuid.uuid4())
