"""Type Registry: which record kinds are content-addressable.

The registry is static configuration, loaded once from a JSON table and
never mutated afterwards. Every kind met while canonicalizing or
identifying must be registered; unknown kinds are an error.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from functools import cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any

from vrsdigest.models.errors import RegistryConfigError, UnknownKindError
from vrsdigest.models.references import (
    DEFAULT_NAMESPACE,
    ReferenceToken,
    build_reference_pattern,
)

__all__ = [
    "TypeInfo",
    "TypeRegistry",
    "load_registry",
    "default_registry",
]

_BUNDLED_REGISTRY = "type_registry.json"


@dataclass(frozen=True)
class TypeInfo:
    """Registry entry for one record kind.

    Attributes
    ----------
    kind : str
        Kind name as carried in the record's kind field.
    addressable : bool
        Whether records of this kind receive their own identifier.
    code : str | None
        Short type code used in identifiers; None for inline kinds.
    """

    kind: str
    addressable: bool
    code: str | None = None

    def __post_init__(self) -> None:
        """Validate code/addressable consistency."""
        if self.addressable and not self.code:
            raise ValueError(f"Addressable kind {self.kind!r} requires a type code")
        if not self.addressable and self.code is not None:
            raise ValueError(f"Non-addressable kind {self.kind!r} must not have a type code")


class TypeRegistry:
    """Immutable lookup table from kind name to TypeInfo.

    Attributes
    ----------
    namespace : str
        Namespace tag of reference tokens (e.g., "ga4gh").
    kind_field : str
        Record field carrying the kind name.
    identifier_field : str
        Record field receiving computed identifiers. Must start with an
        underscore so that it never takes part in canonicalization.
    """

    def __init__(
        self,
        entries: Mapping[str, TypeInfo] | list[TypeInfo],
        *,
        namespace: str = DEFAULT_NAMESPACE,
        kind_field: str = "type",
        identifier_field: str = "_id",
    ) -> None:
        """Initialize registry.

        Parameters
        ----------
        entries : Mapping[str, TypeInfo] | list[TypeInfo]
            Registry entries, keyed by kind or as a list.
        namespace : str, optional
            Reference token namespace, by default "ga4gh".
        kind_field : str, optional
            Name of the kind field, by default "type".
        identifier_field : str, optional
            Name of the identifier field, by default "_id".

        Raises
        ------
        ValueError
            If the identifier field is not underscore-prefixed, or if two
            addressable kinds share a code.
        """
        if not identifier_field.startswith("_"):
            raise ValueError(f"identifier_field must start with '_', got {identifier_field!r}")

        items = list(entries.values()) if isinstance(entries, Mapping) else list(entries)

        by_kind: dict[str, TypeInfo] = {}
        by_code: dict[str, str] = {}
        for info in items:
            by_kind[info.kind] = info
            if info.code is not None:
                if info.code in by_code and by_code[info.code] != info.kind:
                    raise ValueError(
                        f"Type code {info.code!r} used by both {by_code[info.code]!r} "
                        f"and {info.kind!r}"
                    )
                by_code[info.code] = info.kind

        self.namespace = namespace
        self.kind_field = kind_field
        self.identifier_field = identifier_field
        self._entries = MappingProxyType(by_kind)
        self._kinds_by_code = MappingProxyType(by_code)
        self._pattern = build_reference_pattern(namespace, by_code)

    def __contains__(self, kind: object) -> bool:
        return kind in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return (
            f"TypeRegistry(namespace={self.namespace!r}, kinds={len(self._entries)}, "
            f"codes={len(self._kinds_by_code)})"
        )

    @property
    def codes(self) -> frozenset[str]:
        """Codes of all addressable kinds."""
        return frozenset(self._kinds_by_code)

    def kinds(self) -> list[str]:
        """Return registered kind names, sorted."""
        return sorted(self._entries)

    def classify(self, kind: object, path: str = "") -> TypeInfo:
        """Look up the registry entry for a kind.

        Parameters
        ----------
        kind : object
            Kind value taken from a record.
        path : str, optional
            Field path of the record, used in the error message.

        Returns
        -------
        TypeInfo
            Registry entry.

        Raises
        ------
        UnknownKindError
            If the kind is not registered.
        """
        info = self._entries.get(kind) if isinstance(kind, str) else None
        if info is None:
            raise UnknownKindError(kind, path)
        return info

    def is_addressable(self, kind: object, path: str = "") -> bool:
        """Return True if the kind receives its own identifier."""
        return self.classify(kind, path).addressable

    def code_for(self, kind: str) -> str:
        """Return the type code of an addressable kind.

        Raises
        ------
        UnknownKindError
            If the kind is not registered.
        ValueError
            If the kind is not addressable.
        """
        info = self.classify(kind)
        if info.code is None:
            raise ValueError(f"Kind {kind!r} is not content-addressable")
        return info.code

    def kind_for_code(self, code: str) -> str | None:
        """Return the kind registered for a type code, if any."""
        return self._kinds_by_code.get(code)

    def parse_reference(self, value: object) -> ReferenceToken | None:
        """Parse a reference token.

        Parameters
        ----------
        value : object
            Candidate value.

        Returns
        -------
        ReferenceToken | None
            Parsed token, or None if ``value`` is not a string of the
            exact form ``namespace:code.digest`` with a registered code.
        """
        if not isinstance(value, str):
            return None
        match = self._pattern.fullmatch(value)
        if match is None:
            return None
        return ReferenceToken(self.namespace, match["code"], match["digest"])

    def is_reference_token(self, value: object) -> bool:
        """Return True if ``value`` is a well-formed reference token."""
        return self.parse_reference(value) is not None

    def kind_of(self, record: Mapping[str, Any]) -> Any:
        """Return the raw kind value of a record, or None when absent."""
        return record.get(self.kind_field)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON configuration shape."""
        return {
            "namespace": self.namespace,
            "kind_field": self.kind_field,
            "identifier_field": self.identifier_field,
            "kinds": {
                kind: {"addressable": info.addressable, "code": info.code}
                for kind, info in sorted(self._entries.items())
            },
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TypeRegistry":
        """Build a registry from its JSON configuration shape.

        Parameters
        ----------
        data : Mapping[str, Any]
            Configuration with a ``kinds`` table and optional
            ``namespace``, ``kind_field`` and ``identifier_field``.

        Returns
        -------
        TypeRegistry
            New registry.

        Raises
        ------
        RegistryConfigError
            If the configuration is malformed.
        """
        kinds = data.get("kinds") if isinstance(data, Mapping) else None
        if not isinstance(kinds, Mapping) or not kinds:
            raise RegistryConfigError("Registry configuration requires a non-empty 'kinds' table")

        entries: list[TypeInfo] = []
        for kind, options in kinds.items():
            if not isinstance(options, Mapping) or not isinstance(options.get("addressable"), bool):
                raise RegistryConfigError(f"Kind {kind!r}: 'addressable' must be a boolean")
            try:
                info = TypeInfo(
                    kind=kind, addressable=options["addressable"], code=options.get("code")
                )
                entries.append(info)
            except ValueError as e:
                raise RegistryConfigError(str(e)) from e

        try:
            return cls(
                entries,
                namespace=data.get("namespace", DEFAULT_NAMESPACE),
                kind_field=data.get("kind_field", "type"),
                identifier_field=data.get("identifier_field", "_id"),
            )
        except ValueError as e:
            raise RegistryConfigError(str(e)) from e


def load_registry(path: Path | str | None = None) -> TypeRegistry:
    """Load a Type Registry from a JSON file.

    Parameters
    ----------
    path : Path | str | None, optional
        Registry JSON file. If None, loads the bundled VRS 1.x table.

    Returns
    -------
    TypeRegistry
        Loaded registry.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    RegistryConfigError
        If the file is not valid JSON or not a valid registry table.
    """
    if path is None:
        bundled = resources.files("vrsdigest.data").joinpath(_BUNDLED_REGISTRY)
        text = bundled.read_text(encoding="utf-8")
        source = _BUNDLED_REGISTRY
    else:
        registry_path = Path(path)
        if not registry_path.exists():
            raise FileNotFoundError(f"Registry file not found: {registry_path}")
        text = registry_path.read_text(encoding="utf-8")
        source = str(registry_path)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise RegistryConfigError(f"Registry file {source} is not valid JSON: {e}") from e

    return TypeRegistry.from_dict(data)


@cache
def default_registry() -> TypeRegistry:
    """Return the bundled registry, loaded once per process."""
    return load_registry()
