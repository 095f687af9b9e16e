"""
Fingerprint - Content identity for source images.
"""

import hashlib
from pathlib import Path
from typing import Union


def fingerprint(data: bytes) -> str:
    """
    Compute the SHA-256 digest of raw file bytes.

    Identical bytes always produce the identical fingerprint, regardless
    of filename or location.

    Args:
        data: Raw file content

    Returns:
        Lowercase hex digest (64 characters)
    """
    return hashlib.sha256(data).hexdigest()


def fingerprint_file(path: Union[str, Path]) -> str:
    """Fingerprint the content of a file on disk."""
    return fingerprint(Path(path).read_bytes())
