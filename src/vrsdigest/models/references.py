"""Reference tokens: the ``namespace:code.digest`` identifier wire format.

A reference token stands in for a full content-addressable record. Only the
trailing digest is content; the ``namespace:code.`` wrapper is presentation
and never participates in a parent's canonical form.
"""

import re
from collections.abc import Iterable
from typing import NamedTuple

__all__ = [
    "DEFAULT_NAMESPACE",
    "DIGEST_LENGTH",
    "DIGEST_ALPHABET",
    "ReferenceToken",
    "build_reference_pattern",
    "format_reference",
]

DEFAULT_NAMESPACE = "ga4gh"

DIGEST_LENGTH = 32

# URL-safe base64 alphabet, no padding
DIGEST_ALPHABET = r"[A-Za-z0-9_-]"


class ReferenceToken(NamedTuple):
    """Parsed reference token.

    Attributes
    ----------
    namespace : str
        Namespace tag (e.g., "ga4gh").
    code : str
        Short type code of an addressable kind (e.g., "VA").
    digest : str
        32-character URL-safe digest.
    """

    namespace: str
    code: str
    digest: str

    def __str__(self) -> str:
        return format_reference(self.namespace, self.code, self.digest)


def format_reference(namespace: str, code: str, digest: str) -> str:
    """Render a reference token in its wire form.

    Parameters
    ----------
    namespace : str
        Namespace tag.
    code : str
        Type code.
    digest : str
        Digest.

    Returns
    -------
    str
        ``namespace:code.digest``.
    """
    return f"{namespace}:{code}.{digest}"


def build_reference_pattern(namespace: str, codes: Iterable[str]) -> re.Pattern[str]:
    """Compile the reference token recognizer for a namespace and code set.

    Parameters
    ----------
    namespace : str
        Namespace tag.
    codes : Iterable[str]
        Type codes accepted as addressable.

    Returns
    -------
    re.Pattern[str]
        Pattern with groups ``code`` and ``digest``. With no codes the
        pattern matches nothing.
    """
    # Longest first so that e.g. "VAC" is tried before "VA"
    alternation = "|".join(re.escape(c) for c in sorted(set(codes), key=lambda c: (-len(c), c)))
    if not alternation:
        return re.compile(r"(?!x)x")
    digest = f"{DIGEST_ALPHABET}{{{DIGEST_LENGTH}}}"
    return re.compile(rf"{re.escape(namespace)}:(?P<code>{alternation})\.(?P<digest>{digest})")
