"""Exception hierarchy for vrsdigest.

Every error raised by the canonicalization and identification core is a
caller contract violation: nothing here is retried, and each error carries
the field path needed to locate the offending value.
"""

__all__ = [
    "VrsDigestError",
    "UnknownKindError",
    "NotSerializableError",
    "RegistryConfigError",
    "RecordValidationError",
]


def _where(path: str) -> str:
    return path if path else "<root>"


class VrsDigestError(Exception):
    """Base class for all vrsdigest errors."""


class UnknownKindError(VrsDigestError):
    """Raised when a record kind is absent from the Type Registry.

    Attributes
    ----------
    kind : object
        The offending kind value as found in the record.
    path : str
        Dotted field path of the record carrying the kind.
    """

    def __init__(self, kind: object, path: str = "") -> None:
        """Initialize unknown kind error.

        Parameters
        ----------
        kind : object
            Kind value that could not be classified.
        path : str, optional
            Field path of the record, by default the root.
        """
        super().__init__(f"Unknown record kind {kind!r} at '{_where(path)}'")
        self.kind = kind
        self.path = path


class NotSerializableError(VrsDigestError):
    """Raised when a value has no canonical representation.

    Attributes
    ----------
    path : str
        Dotted field path of the offending value.
    value_type : str
        Python type name of the offending value.
    """

    def __init__(self, path: str, value_type: str, detail: str | None = None) -> None:
        """Initialize not-serializable error.

        Parameters
        ----------
        path : str
            Field path of the offending value.
        value_type : str
            Type name of the offending value.
        detail : str | None, optional
            Additional explanation appended to the message.
        """
        message = f"Cannot serialize value of type {value_type} at '{_where(path)}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.path = path
        self.value_type = value_type


class RegistryConfigError(VrsDigestError):
    """Raised when a Type Registry configuration is malformed."""


class RecordValidationError(VrsDigestError):
    """Raised when a record does not match the structural schema of its kind.

    Attributes
    ----------
    kind : str | None
        Kind the record was validated against.
    errors : list[str]
        Validation messages, one per violation.
    """

    def __init__(self, kind: str | None, errors: list[str]) -> None:
        """Initialize record validation error.

        Parameters
        ----------
        kind : str | None
            Kind the record was validated against.
        errors : list[str]
            Validation messages.
        """
        summary = "; ".join(errors[:3])
        if len(errors) > 3:
            summary += f" (+{len(errors) - 3} more)"
        super().__init__(f"Invalid {kind or 'record'}: {summary}")
        self.kind = kind
        self.errors = errors
