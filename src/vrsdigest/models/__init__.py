"""Shared data types for vrsdigest.

This package contains the error hierarchy, the reference token wire format
and the Type Registry consumed across canonicalization and identification.
"""

from vrsdigest.models.errors import (
    NotSerializableError,
    RecordValidationError,
    RegistryConfigError,
    UnknownKindError,
    VrsDigestError,
)
from vrsdigest.models.references import (
    DEFAULT_NAMESPACE,
    DIGEST_LENGTH,
    ReferenceToken,
    format_reference,
)
from vrsdigest.models.registry import (
    TypeInfo,
    TypeRegistry,
    default_registry,
    load_registry,
)

__all__ = [
    # Errors
    "VrsDigestError",
    "UnknownKindError",
    "NotSerializableError",
    "RegistryConfigError",
    "RecordValidationError",
    # Reference tokens
    "DEFAULT_NAMESPACE",
    "DIGEST_LENGTH",
    "ReferenceToken",
    "format_reference",
    # Registry
    "TypeInfo",
    "TypeRegistry",
    "default_registry",
    "load_registry",
]
