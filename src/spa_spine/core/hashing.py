"""
Deterministic hashing for cache identities.

``compute_hash`` joins the string form of its arguments with ``|`` and
hashes the result with SHA-256, so the same inputs always give the same
key and argument order matters.

Examples:
    >>> compute_hash("example.com", "/about", "en-US") == compute_hash("example.com", "/about", "en-US")
    True
    >>> len(compute_hash("a", length=16))
    16
"""

import hashlib
from typing import Any


def compute_hash(*values: Any, length: int = 32) -> str:
    """
    Compute a deterministic hex hash from values.

    ``None`` is rendered as an empty string; everything else through
    ``str()``.

    Args:
        *values: Values to hash
        length: Hex digest length (default 32 = 128 bits)

    Returns:
        Hex string of the requested length
    """
    content = "|".join("" if v is None else str(v) for v in values)
    return hashlib.sha256(content.encode()).hexdigest()[:length]
