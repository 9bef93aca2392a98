"""Canonical serialization (deterministic JSON) of variation records."""

from vrsdigest.canonical.serializer import (
    canonicalize,
    child_path,
    dictify,
    encode_canonical_json,
    item_path,
)

__all__ = [
    "canonicalize",
    "dictify",
    "encode_canonical_json",
    "child_path",
    "item_path",
]
