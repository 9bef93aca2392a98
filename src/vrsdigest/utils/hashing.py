"""Hashing utilities for vrsdigest.

This module provides the truncated SHA-512 digest used for computed
identifiers, plus the SHA-256 helpers used for audit artifacts.
"""

import base64
import hashlib
import re
from pathlib import Path

__all__ = [
    "sha512t24u",
    "is_digest",
    "format_sha256",
    "calculate_file_sha256",
]

_DIGEST_SIZE = 24

_DIGEST_RE = re.compile(r"[A-Za-z0-9_-]{32}")


def sha512t24u(blob: bytes) -> str:
    """Compute the base64url-encoded, truncated SHA-512 digest of bytes.

    Parameters
    ----------
    blob : bytes
        Input bytes (a canonical form).

    Returns
    -------
    str
        32-character digest drawn from ``[A-Za-z0-9_-]``.

    Notes
    -----
    The digest is the first 24 bytes (192 bits) of SHA-512, encoded with
    the URL-safe base64 alphabet. 24 bytes encode to exactly 32 characters,
    so no padding is ever produced. The construction is fixed by the
    identifier wire format and must match other implementations exactly.

    Examples
    --------
    >>> sha512t24u(b"")
    'z4PhNX7vuL3xVChQ1m2AB9Yg5AULVxXc'
    >>> sha512t24u(b"ACGT")
    'aKF498dAxcJAqme6QYQ7EZ07-fiw8Kw2'
    """
    digest = hashlib.sha512(blob).digest()[:_DIGEST_SIZE]
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def is_digest(value: object) -> bool:
    """Return True if ``value`` has the shape of a sha512t24u digest."""
    return isinstance(value, str) and _DIGEST_RE.fullmatch(value) is not None


def format_sha256(hex_digest: str) -> str:
    """Format SHA256 hash with standard prefix.

    Parameters
    ----------
    hex_digest : str
        Raw hexadecimal digest.

    Returns
    -------
    str
        Formatted hash with "sha256:" prefix.
    """
    return f"sha256:{hex_digest}"


def calculate_file_sha256(path: Path) -> str:
    """Calculate SHA256 hash of file contents from file path.

    Parameters
    ----------
    path : Path
        Path to file.

    Returns
    -------
    str
        SHA256 hash with "sha256:" prefix.

    Raises
    ------
    FileNotFoundError
        If file does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    sha256_hash = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            sha256_hash.update(chunk)

    return format_sha256(sha256_hash.hexdigest())
