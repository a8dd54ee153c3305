"""Content fingerprints for change detection."""

import hashlib
from pathlib import Path

_CHUNK_SIZE = 1024 * 1024


def fingerprint_file(path: Path) -> str:
    """Compute the SHA-256 hex digest of a file's content.

    Args:
        path: File to hash

    Returns:
        Hexadecimal digest
    """
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()
