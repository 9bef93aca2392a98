"""Canonical serialization of variation records.

Turns a record (nested mappings, lists, strings, integers, booleans) into
one deterministic byte string, the input of the identifier digest.

Rules, applied recursively:

1. Mapping keys are emitted in ascending Unicode code point order.
2. Keys starting with ``_`` are dropped; they hold local annotations such
   as computed identifiers and never take part in identity.
3. Reference tokens are reduced to their trailing digest.
4. A list whose elements all reduce to strings (plain strings, reference
   tokens, nested addressable records) is set-like and is sorted.
5. Any other list keeps its order.
6. Integers and booleans use their plain JSON forms.
7. Output is compact JSON, UTF-8, without escaping ``/`` or non-ASCII text.

Nested content-addressable records still present inline are replaced by
their own digest, so raw records can be canonicalized directly.
"""

import json
from collections.abc import Mapping
from typing import Any

from vrsdigest.models.errors import NotSerializableError
from vrsdigest.models.registry import TypeRegistry, default_registry
from vrsdigest.utils.hashing import sha512t24u

__all__ = [
    "canonicalize",
    "dictify",
    "encode_canonical_json",
    "child_path",
    "item_path",
]


def child_path(path: str, key: str) -> str:
    """Return the dotted path of a mapping field."""
    return f"{path}.{key}" if path else key


def item_path(path: str, index: int) -> str:
    """Return the path of a list element."""
    return f"{path}[{index}]"


def encode_canonical_json(value: Any) -> bytes:
    """Encode an already-canonical value as compact UTF-8 JSON.

    Parameters
    ----------
    value : Any
        Output of :func:`dictify`.

    Returns
    -------
    bytes
        Compact JSON bytes.
    """
    # str ordering in Python is code point ordering
    return json.dumps(
        value,
        sort_keys=True,
        ensure_ascii=False,
        separators=(",", ":"),
        allow_nan=False,
    ).encode("utf-8")


def dictify(
    value: Any,
    registry: TypeRegistry | None = None,
    *,
    enref: bool = False,
    path: str = "",
) -> Any:
    """Reduce a value to its canonical Python form.

    Parameters
    ----------
    value : Any
        Record or value to reduce.
    registry : TypeRegistry | None, optional
        Type Registry, by default the bundled one.
    enref : bool, optional
        Replace ``value`` itself by its digest when it is a
        content-addressable record. Nested records are always reduced.
    path : str, optional
        Field path of ``value``, used in error messages.

    Returns
    -------
    Any
        Canonical value made of dicts, lists, strings, ints and bools.

    Raises
    ------
    UnknownKindError
        If a record carries an unregistered kind.
    NotSerializableError
        If a value has no canonical representation.
    """
    if registry is None:
        registry = default_registry()
    return _dictify(value, registry, enref, path)


def _dictify(value: Any, registry: TypeRegistry, enref: bool, path: str) -> Any:
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return value

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        return _strip_reference(value, registry)

    if isinstance(value, Mapping):
        if registry.kind_field in value:
            info = registry.classify(value[registry.kind_field], path)
            if enref and info.addressable:
                return sha512t24u(encode_canonical_json(_dictify_mapping(value, registry, path)))
        return _dictify_mapping(value, registry, path)

    if isinstance(value, (list, tuple)):
        items = [
            _dictify(item, registry, True, item_path(path, i)) for i, item in enumerate(value)
        ]
        # Set-like once every element is a string or a reference
        if all(isinstance(item, str) for item in items):
            return sorted(items)
        return items

    detail = "floating point values are not canonical" if isinstance(value, float) else None
    raise NotSerializableError(path, type(value).__name__, detail)


def _dictify_mapping(value: Mapping[Any, Any], registry: TypeRegistry, path: str) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key in value:
        if not isinstance(key, str):
            raise NotSerializableError(path, type(key).__name__, "mapping keys must be strings")
        if key.startswith("_"):
            continue
        result[key] = _dictify(value[key], registry, True, child_path(path, key))
    return dict(sorted(result.items()))


def _strip_reference(value: str, registry: TypeRegistry) -> str:
    token = registry.parse_reference(value)
    return token.digest if token is not None else value


def canonicalize(record: Any, registry: TypeRegistry | None = None) -> bytes:
    """Return the canonical form of a record.

    Parameters
    ----------
    record : Any
        Record to serialize. The record itself is never replaced by its
        digest, even when it is content-addressable.
    registry : TypeRegistry | None, optional
        Type Registry, by default the bundled one.

    Returns
    -------
    bytes
        Canonical UTF-8 JSON bytes.

    Raises
    ------
    UnknownKindError
        If a record carries an unregistered kind.
    NotSerializableError
        If a value has no canonical representation.

    Examples
    --------
    >>> canonicalize({"type": "LiteralSequenceExpression", "sequence": "T"})
    b'{"sequence":"T","type":"LiteralSequenceExpression"}'
    """
    return encode_canonical_json(dictify(record, registry, enref=False))
