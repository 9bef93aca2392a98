"""Digests and identifiers of single records."""

from collections.abc import Mapping
from typing import Any

from vrsdigest.canonical.serializer import canonicalize
from vrsdigest.models.references import format_reference
from vrsdigest.models.registry import TypeRegistry, default_registry
from vrsdigest.utils.hashing import sha512t24u

__all__ = ["ga4gh_digest", "ga4gh_identify"]


def ga4gh_digest(record: Any, registry: TypeRegistry | None = None) -> str:
    """Return the digest of a record's canonical form.

    Parameters
    ----------
    record : Any
        Record to digest.
    registry : TypeRegistry | None, optional
        Type Registry, by default the bundled one.

    Returns
    -------
    str
        32-character sha512t24u digest.
    """
    return sha512t24u(canonicalize(record, registry))


def ga4gh_identify(record: Mapping[str, Any], registry: TypeRegistry | None = None) -> str:
    """Return the computed identifier of a content-addressable record.

    Parameters
    ----------
    record : Mapping[str, Any]
        Record of an addressable kind.
    registry : TypeRegistry | None, optional
        Type Registry, by default the bundled one.

    Returns
    -------
    str
        Identifier ``namespace:code.digest``.

    Raises
    ------
    UnknownKindError
        If the record's kind is not registered.
    ValueError
        If the record has no kind or its kind is not addressable.
    """
    if registry is None:
        registry = default_registry()

    if not isinstance(record, Mapping) or registry.kind_field not in record:
        raise ValueError(f"Record has no '{registry.kind_field}' field to identify")

    info = registry.classify(record[registry.kind_field])
    if info.code is None:
        raise ValueError(f"Kind {info.kind!r} is not content-addressable")

    return format_reference(registry.namespace, info.code, ga4gh_digest(record, registry))
