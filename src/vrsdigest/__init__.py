"""Computed identifiers for GA4GH variation records.

This package provides:
- Data models (vrsdigest.models): errors, reference tokens, Type Registry
- Canonical serialization (vrsdigest.canonical): deterministic JSON
- Identification (vrsdigest.identify): digests and identifier assignment
- Validation (vrsdigest.validate): structural schema checks
- Conformance (vrsdigest.conformance): published test vectors
- Engine (vrsdigest.engine): batch orchestration
- Audit (vrsdigest.audit): structured event logging
- CLI (vrsdigest.cli): command-line interface
- Public API (vrsdigest.api): high-level convenience functions
"""

__version__ = "0.1.0"
__license__ = "MIT"

from vrsdigest.api import (
    IdentifyError,
    canonicalize,
    digest,
    ga4gh_identify,
    identify,
    identify_file,
    is_reference_token,
    read_records,
    write_jsonl,
)
from vrsdigest.models import (
    NotSerializableError,
    TypeRegistry,
    UnknownKindError,
    VrsDigestError,
    default_registry,
    load_registry,
)

__all__ = [
    "__version__",
    "__license__",
    "canonicalize",
    "digest",
    "identify",
    "ga4gh_identify",
    "is_reference_token",
    "read_records",
    "write_jsonl",
    "identify_file",
    "IdentifyError",
    "VrsDigestError",
    "UnknownKindError",
    "NotSerializableError",
    "TypeRegistry",
    "default_registry",
    "load_registry",
]
