"""Public API for computing variation identifiers.

This module provides the main public API for vrsdigest, enabling:
- Canonical serialization, digests and identifiers of single records
- Reading and writing record files
- Running batch identification over a file
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from vrsdigest.canonical.serializer import canonicalize as _canonicalize
from vrsdigest.engine.records import read_records, write_jsonl
from vrsdigest.identify.assigner import identify as _identify
from vrsdigest.identify.digests import ga4gh_digest, ga4gh_identify
from vrsdigest.models.registry import TypeRegistry, default_registry

if TYPE_CHECKING:
    from vrsdigest.engine.config import BatchResult

__all__ = [
    "canonicalize",
    "digest",
    "identify",
    "ga4gh_identify",
    "is_reference_token",
    "read_records",
    "write_jsonl",
    "identify_file",
    "IdentifyError",
]


class IdentifyError(Exception):
    """Raised when batch identification of a file fails."""

    def __init__(
        self,
        message: str,
        file: str | None = None,
    ) -> None:
        """Initialize identify error.

        Parameters
        ----------
        message : str
            Error message.
        file : str | None, optional
            Input file of the failed batch.
        """
        super().__init__(message)
        self.file = file


def canonicalize(record: Any, registry: TypeRegistry | None = None) -> bytes:
    """Return the canonical byte form of a record.

    Examples
    --------
        >>> from vrsdigest import canonicalize
        >>> canonicalize({"type": "LiteralSequenceExpression", "sequence": "T"})
        b'{"sequence":"T","type":"LiteralSequenceExpression"}'
    """
    return _canonicalize(record, registry)


def digest(record: Any, registry: TypeRegistry | None = None) -> str:
    """Return the 32-character digest of a record's canonical form."""
    return ga4gh_digest(record, registry)


def identify(record: Mapping[str, Any], registry: TypeRegistry | None = None) -> dict[str, Any]:
    """Return a copy of a record with identifiers assigned throughout.

    Examples
    --------
    Identify an allele; nested addressable records get identifiers too:

        >>> from vrsdigest import identify
        >>> allele = identify(record)
        >>> allele["_id"]
        'ga4gh:VA.CxiA_hvYbkD8Vqwjhx5AYuyul4mtlkpD'
        >>> allele["location"]["_id"].startswith("ga4gh:VSL.")
        True
    """
    return _identify(record, registry)


def is_reference_token(value: object, registry: TypeRegistry | None = None) -> bool:
    """Return True if ``value`` is a well-formed reference token.

    Parameters
    ----------
    value : object
        Candidate value.
    registry : TypeRegistry | None, optional
        Type Registry whose namespace and codes are accepted, by default
        the bundled one.

    Returns
    -------
    bool
        True for an exact ``namespace:code.digest`` string with a
        registered code.
    """
    if registry is None:
        registry = default_registry()
    return registry.is_reference_token(value)


def identify_file(
    input_path: str | Path,
    *,
    output_dir: str | Path = "out",
    validate: bool = False,
    max_workers: int | None = None,
) -> BatchResult:
    """Identify every record of a JSON or JSON Lines file.

    Simplified interface to the batch runner. Identified records are
    written to ``output_dir/identified.jsonl`` alongside the
    ``events.jsonl`` audit log.

    Parameters
    ----------
    input_path : str | Path
        ``.jsonl`` or ``.json`` file of records.
    output_dir : str | Path, optional
        Directory for output files, by default "out".
    validate : bool, optional
        Skip records that fail structural validation, by default False.
    max_workers : int | None, optional
        Worker threads for identification, by default sequential.

    Returns
    -------
    BatchResult
        Batch result with counts, per-record failures and output paths.

    Raises
    ------
    FileNotFoundError
        If input path does not exist.
    IdentifyError
        If the batch run fails.

    Examples
    --------
        >>> from vrsdigest import identify_file
        >>> result = identify_file("variants.jsonl", output_dir="results")
        >>> print(result.identified, result.failed)
    """
    from vrsdigest.engine import BatchConfig, run_batch

    input_path_obj = Path(input_path)

    if not input_path_obj.exists():
        raise FileNotFoundError(f"Input path not found: {input_path}")

    config = BatchConfig(
        output_dir=Path(output_dir),
        validate=validate,
        max_workers=max_workers,
    )

    result = run_batch(input_path=input_path_obj, config=config)

    if not result.success:
        raise IdentifyError(
            f"Identification failed: {result.error_message}", file=str(input_path_obj)
        )

    return result
