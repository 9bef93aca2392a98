"""Common utility functions for vrsdigest.

Hashing (the identifier digest and audit checksums) and timestamps.
"""

from vrsdigest.utils.hashing import (
    calculate_file_sha256,
    format_sha256,
    is_digest,
    sha512t24u,
)
from vrsdigest.utils.timestamps import get_iso_timestamp

__all__ = [
    "sha512t24u",
    "is_digest",
    "format_sha256",
    "calculate_file_sha256",
    "get_iso_timestamp",
]
