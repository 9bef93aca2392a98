"""Structural validation of records against per-kind JSON Schemas.

This is the validation step callers run before identification. It checks
required fields and value shapes only; the identification core never calls
it and never re-validates structure beyond the Type Registry lookup.
"""

import json
from collections.abc import Mapping
from functools import cache
from importlib import resources
from pathlib import Path
from typing import Any

import jsonschema

from vrsdigest.models.errors import RecordValidationError

__all__ = [
    "SchemaValidator",
    "default_validator",
    "load_schema",
    "validator_for",
]

_BUNDLED_SCHEMA = "vrs_1x.schema.json"


def load_schema(path: Path | str | None = None) -> dict[str, Any]:
    """Load a record schema document.

    Parameters
    ----------
    path : Path | str | None, optional
        JSON Schema file with one ``$defs`` entry per kind. If None, loads
        the bundled VRS 1.x schema.

    Returns
    -------
    dict[str, Any]
        Schema document.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    if path is None:
        bundled = resources.files("vrsdigest.data").joinpath(_BUNDLED_SCHEMA)
        return json.loads(bundled.read_text(encoding="utf-8"))

    schema_path = Path(path)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_path}")
    with schema_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _format_path(parts: Any) -> str:
    path = ""
    for part in parts:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path or "<root>"


class SchemaValidator:
    """Validator compiling one JSON Schema validator per record kind.

    Kinds are the ``$defs`` entries whose ``type`` property is a constant
    equal to the definition name; the remaining definitions (CURIE,
    Count, unions) are shared building blocks.

    Attributes
    ----------
    schema : dict[str, Any]
        Full schema document.
    """

    def __init__(self, schema: dict[str, Any] | None = None, kind_field: str = "type") -> None:
        """Initialize validator.

        Parameters
        ----------
        schema : dict[str, Any] | None, optional
            Schema document, by default the bundled one.
        kind_field : str, optional
            Record field carrying the kind, by default "type".

        Raises
        ------
        jsonschema.SchemaError
            If the schema document itself is invalid.
        """
        self.schema = schema if schema is not None else load_schema()
        self.kind_field = kind_field

        validator_cls = jsonschema.validators.validator_for(
            self.schema, default=jsonschema.Draft202012Validator
        )
        validator_cls.check_schema(self.schema)

        defs = self.schema.get("$defs", {})
        self._validators: dict[str, Any] = {}
        for name, definition in defs.items():
            const = definition.get("properties", {}).get(kind_field, {}).get("const")
            if const != name:
                continue
            kind_schema = {key: value for key, value in self.schema.items() if key != "title"}
            kind_schema["$ref"] = f"#/$defs/{name}"
            self._validators[name] = validator_cls(kind_schema)

    @property
    def kinds(self) -> list[str]:
        """Kinds with a structural schema, sorted."""
        return sorted(self._validators)

    def errors(self, record: Any, kind: str | None = None) -> list[str]:
        """Return structural errors of a record.

        Parameters
        ----------
        record : Any
            Candidate record.
        kind : str | None, optional
            Kind to validate against, by default the record's own kind.

        Returns
        -------
        list[str]
            Messages of the form ``"<path>: <message>"``, sorted by path.
            Empty when the record is valid.
        """
        if kind is None:
            kind = record.get(self.kind_field) if isinstance(record, Mapping) else None
            if kind is None:
                return [f"<root>: record has no '{self.kind_field}' field"]

        validator = self._validators.get(kind) if isinstance(kind, str) else None
        if validator is None:
            return [f"<root>: no structural schema for kind {kind!r}"]

        messages = [
            f"{_format_path(error.absolute_path)}: {error.message}"
            for error in validator.iter_errors(record)
        ]
        return sorted(messages)

    def is_valid(self, record: Any, kind: str | None = None) -> bool:
        """Return True if the record matches its kind's schema."""
        return not self.errors(record, kind)

    def validate(self, record: Any, kind: str | None = None) -> None:
        """Validate a record.

        Raises
        ------
        RecordValidationError
            If the record does not match its kind's schema.
        """
        messages = self.errors(record, kind)
        if messages:
            if kind is None and isinstance(record, Mapping):
                kind = record.get(self.kind_field)
            raise RecordValidationError(kind if isinstance(kind, str) else None, messages)


@cache
def default_validator() -> SchemaValidator:
    """Return the bundled validator, compiled once per process."""
    return SchemaValidator()


def validator_for(kind_field: str = "type") -> SchemaValidator:
    """Return the bundled validator keyed on ``kind_field``.

    The cached default is shared when the kind field is ``type``.
    """
    if kind_field == "type":
        return default_validator()
    return SchemaValidator(kind_field=kind_field)
