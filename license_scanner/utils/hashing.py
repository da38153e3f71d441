"""Hashing utilities for normalized license text.

The digests are computed over the final normalized text so that two inputs
that differ only in guideline-permitted ways (case, whitespace, comment
markers, ...) hash identically. They serve as exact-match cache keys.
"""

import hashlib
from typing import Dict


def compute_digests(text: str) -> Dict[str, str]:
    """Compute MD5, SHA-256 and SHA-512 hex digests of a text.

    Args:
        text: Text to hash (encoded as UTF-8)

    Returns:
        Dict with keys "md5", "sha256" and "sha512"

    Example:
        >>> sorted(compute_digests("mit license"))
        ['md5', 'sha256', 'sha512']
    """
    data = text.encode("utf-8")
    return {
        "md5": hashlib.md5(data).hexdigest(),  # noqa: S324
        "sha256": hashlib.sha256(data).hexdigest(),
        "sha512": hashlib.sha512(data).hexdigest(),
    }

