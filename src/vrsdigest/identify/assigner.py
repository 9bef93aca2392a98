"""Identifier assignment over whole record trees.

Walks a record bottom-up. Every content-addressable node is serialized with
its addressable children already reduced to their reference tokens, digested,
and given an identifier field; the token then stands in for the node when its
parent is serialized. Non-addressable nodes stay inline and are hashed only
as part of their nearest addressable ancestor.

The input is never modified: a new tree is built and returned.
"""

import copy
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from vrsdigest.canonical.serializer import canonicalize, child_path, item_path
from vrsdigest.models.errors import NotSerializableError
from vrsdigest.models.references import format_reference
from vrsdigest.models.registry import TypeRegistry, default_registry
from vrsdigest.utils.hashing import sha512t24u

__all__ = ["identify", "identify_all"]


def identify(record: Mapping[str, Any], registry: TypeRegistry | None = None) -> dict[str, Any]:
    """Assign computed identifiers throughout a record tree.

    Parameters
    ----------
    record : Mapping[str, Any]
        Record to identify, including nested sub-records.
    registry : TypeRegistry | None, optional
        Type Registry, by default the bundled one.

    Returns
    -------
    dict[str, Any]
        Copy of ``record`` in which every addressable node, the root
        included, carries its identifier under the registry's identifier
        field. Any previous identifier value is overwritten.

    Raises
    ------
    UnknownKindError
        If any node carries an unregistered kind. Nothing is returned.
    NotSerializableError
        If any value has no canonical representation.

    Notes
    -----
    Identification is idempotent: the identifier field is underscore
    prefixed and never part of a canonical form, so running ``identify``
    on its own output yields the same identifiers.
    """
    if registry is None:
        registry = default_registry()

    if not isinstance(record, Mapping):
        raise NotSerializableError("", type(record).__name__, "a record must be a mapping")

    identified, _ = _walk(record, registry, "")
    return identified


def identify_all(
    records: Iterable[Mapping[str, Any]],
    registry: TypeRegistry | None = None,
    max_workers: int | None = None,
) -> list[dict[str, Any]]:
    """Identify independent records, optionally in parallel.

    Parameters
    ----------
    records : Iterable[Mapping[str, Any]]
        Records to identify.
    registry : TypeRegistry | None, optional
        Type Registry, by default the bundled one.
    max_workers : int | None, optional
        Worker threads. None or 1 identifies sequentially.

    Returns
    -------
    list[dict[str, Any]]
        Identified records, in input order.

    Raises
    ------
    UnknownKindError
        First failure in input order.
    NotSerializableError
        First failure in input order.
    """
    if registry is None:
        registry = default_registry()

    if max_workers is None or max_workers <= 1:
        return [identify(record, registry) for record in records]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(lambda record: identify(record, registry), records))


def _walk(value: Any, registry: TypeRegistry, path: str) -> tuple[Any, Any]:
    """Return ``(identified, reference_view)`` for a value.

    The reference view is what a parent serializes: the token for an
    addressable record, the reduced structure for anything else.
    """
    if isinstance(value, (bool, int, str)):
        return value, value

    if isinstance(value, Mapping):
        return _walk_mapping(value, registry, path)

    if isinstance(value, (list, tuple)):
        identified: list[Any] = []
        view: list[Any] = []
        for i, item in enumerate(value):
            item_identified, item_view = _walk(item, registry, item_path(path, i))
            identified.append(item_identified)
            view.append(item_view)
        return identified, view

    detail = "floating point values are not canonical" if isinstance(value, float) else None
    raise NotSerializableError(path, type(value).__name__, detail)


def _walk_mapping(value: Mapping[Any, Any], registry: TypeRegistry, path: str) -> tuple[Any, Any]:
    info = None
    if registry.kind_field in value:
        info = registry.classify(value[registry.kind_field], path)

    identified: dict[str, Any] = {}
    view: dict[str, Any] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            raise NotSerializableError(path, type(key).__name__, "mapping keys must be strings")
        if key.startswith("_"):
            # Annotations are carried over as-is and never hashed
            identified[key] = copy.deepcopy(item)
            continue
        identified[key], view[key] = _walk(item, registry, child_path(path, key))

    if info is None or info.code is None:
        return identified, view

    digest = sha512t24u(canonicalize(view, registry))
    token = format_reference(registry.namespace, info.code, digest)
    identified[registry.identifier_field] = token
    return identified, token
