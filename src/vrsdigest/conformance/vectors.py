"""Conformance vectors: published records with their expected outputs.

A vector document maps each kind to a list of examples::

    Allele:
      - in: {type: Allele, location: {...}, state: {...}}
        out:
          ga4gh_serialize: '{"location":"...","state":{...},"type":"Allele"}'
          ga4gh_digest: CxiA_hvYbkD8Vqwjhx5AYuyul4mtlkpD
          ga4gh_identify: ga4gh:VA.CxiA_hvYbkD8Vqwjhx5AYuyul4mtlkpD

Function documents list a primitive with blob inputs and its plain string
result::

    sha512t24u:
      - in: {blob: ACGT}
        out: aKF498dAxcJAqme6QYQ7EZ07-fiw8Kw2

Documents are YAML (JSON is accepted too) and are read from a local file
or fetched over HTTP(S). Checking a model vector validates the input
structurally, then recomputes only the outputs it names and compares them
byte for byte.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx
import yaml

from vrsdigest.canonical.serializer import canonicalize
from vrsdigest.identify.digests import ga4gh_digest, ga4gh_identify
from vrsdigest.models.registry import TypeRegistry, default_registry
from vrsdigest.utils.hashing import sha512t24u
from vrsdigest.validate.schema import SchemaValidator, validator_for

__all__ = [
    "ConformanceVector",
    "VectorResult",
    "ConformanceReport",
    "parse_vectors",
    "load_vectors",
    "check_vector",
    "check_vectors",
    "FUNCTIONS",
]

_OUTPUT_KEYS = ("ga4gh_serialize", "ga4gh_digest", "ga4gh_identify")

# Primitives checked by function documents, applied to the UTF-8 encoded blob
FUNCTIONS: dict[str, Callable[[bytes], str]] = {"sha512t24u": sha512t24u}


@dataclass(frozen=True)
class ConformanceVector:
    """One published example record and its expected outputs.

    Attributes
    ----------
    kind : str
        Kind the example is listed under.
    index : int
        Position of the example within its kind.
    record : dict[str, Any]
        Input record.
    expected_serialize : str | None
        Expected canonical form, as text.
    expected_digest : str | None
        Expected digest.
    expected_identify : str | None
        Expected identifier.
    expected_output : str | None
        Expected return value of a function vector.
    """

    kind: str
    index: int
    record: dict[str, Any]
    expected_serialize: str | None = None
    expected_digest: str | None = None
    expected_identify: str | None = None
    expected_output: str | None = None

    @property
    def is_function(self) -> bool:
        """True for a function vector, whose record is ``{"blob": ...}``."""
        return self.kind in FUNCTIONS

    @property
    def label(self) -> str:
        """Short label, e.g. ``Allele[0]``."""
        return f"{self.kind}[{self.index}]"


@dataclass(frozen=True)
class VectorResult:
    """Outcome of checking one vector.

    Attributes
    ----------
    vector : ConformanceVector
        Checked vector.
    failures : tuple[str, ...]
        One message per mismatching output; empty when all outputs match.
    """

    vector: ConformanceVector
    failures: tuple[str, ...] = ()

    @property
    def passed(self) -> bool:
        """True when every expected output matched."""
        return not self.failures


@dataclass
class ConformanceReport:
    """Summary of a conformance run.

    Attributes
    ----------
    results : list[VectorResult]
        Per-vector outcomes, in document order.
    """

    results: list[VectorResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Number of vectors checked."""
        return len(self.results)

    @property
    def passed(self) -> int:
        """Number of vectors whose outputs all matched."""
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        """Number of vectors with at least one mismatch."""
        return self.total - self.passed

    @property
    def success(self) -> bool:
        """True when every vector passed."""
        return self.failed == 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "failures": {r.vector.label: list(r.failures) for r in self.results if not r.passed},
        }


def parse_vectors(data: Any) -> list[ConformanceVector]:
    """Build vectors from a parsed vector document.

    Parameters
    ----------
    data : Any
        Parsed document: mapping of kind (or function name) to a list of
        ``{in, out}`` entries.

    Returns
    -------
    list[ConformanceVector]
        Vectors in document order.

    Raises
    ------
    ValueError
        If the document does not have the expected shape.
    """
    if not isinstance(data, Mapping):
        raise ValueError("Vector document must be a mapping of kind to examples")

    vectors: list[ConformanceVector] = []
    for kind, examples in data.items():
        if not isinstance(examples, list):
            raise ValueError(f"Examples for {kind!r} must be a list")
        for index, example in enumerate(examples):
            where = f"{kind}[{index}]"
            if not isinstance(example, Mapping) or not isinstance(example.get("in"), Mapping):
                raise ValueError(f"{where}: example requires an 'in' mapping")
            if kind in FUNCTIONS:
                vectors.append(_parse_function_example(str(kind), index, example, where))
                continue
            out = example.get("out")
            if not isinstance(out, Mapping) or not any(out.get(key) for key in _OUTPUT_KEYS):
                raise ValueError(f"{where}: example requires at least one expected output")
            vectors.append(
                ConformanceVector(
                    kind=str(kind),
                    index=index,
                    record=dict(example["in"]),
                    expected_serialize=out.get("ga4gh_serialize"),
                    expected_digest=out.get("ga4gh_digest"),
                    expected_identify=out.get("ga4gh_identify"),
                )
            )
    return vectors


def _parse_function_example(
    kind: str, index: int, example: Mapping[str, Any], where: str
) -> ConformanceVector:
    if not isinstance(example["in"].get("blob"), str):
        raise ValueError(f"{where}: function example requires a string 'blob' input")
    out = example.get("out")
    if not isinstance(out, str):
        raise ValueError(f"{where}: function example requires a string output")
    return ConformanceVector(
        kind=kind, index=index, record=dict(example["in"]), expected_output=out
    )


def load_vectors(
    source: str | Path,
    *,
    client: httpx.Client | None = None,
    timeout: float = 30.0,
) -> list[ConformanceVector]:
    """Load conformance vectors from a file or URL.

    Parameters
    ----------
    source : str | Path
        Local path, or an ``http://`` / ``https://`` URL.
    client : httpx.Client | None, optional
        HTTP client for URL sources. A short-lived client is created when
        None.
    timeout : float, optional
        Request timeout in seconds for a created client, by default 30.0.

    Returns
    -------
    list[ConformanceVector]
        Parsed vectors.

    Raises
    ------
    FileNotFoundError
        If a local source does not exist.
    httpx.HTTPError
        If a URL cannot be fetched.
    ValueError
        If the document is not valid YAML or has the wrong shape.
    """
    text = _read_source(source, client=client, timeout=timeout)
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Vector document {source} is not valid YAML: {e}") from e
    return parse_vectors(data)


def _read_source(source: str | Path, *, client: httpx.Client | None, timeout: float) -> str:
    if isinstance(source, str) and source.startswith(("http://", "https://")):
        if client is not None:
            response = client.get(source)
            response.raise_for_status()
            return response.text
        with httpx.Client(timeout=timeout, follow_redirects=True) as owned:
            response = owned.get(source)
            response.raise_for_status()
            return response.text

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Vector file not found: {path}")
    return path.read_text(encoding="utf-8")


def check_vector(
    vector: ConformanceVector,
    registry: TypeRegistry | None = None,
    validator: SchemaValidator | None = None,
) -> VectorResult:
    """Recompute a vector's expected outputs and compare them.

    Model vectors are also checked against their kind's structural schema;
    each structural error is reported as a ``structure:`` failure.

    Parameters
    ----------
    vector : ConformanceVector
        Vector to check.
    registry : TypeRegistry | None, optional
        Type Registry, by default the bundled one.
    validator : SchemaValidator | None, optional
        Structural validator, by default the bundled one for the registry's
        kind field.

    Returns
    -------
    VectorResult
        Outcome; errors raised while computing become failure messages.
    """
    if vector.is_function:
        return _check_function(vector)

    if registry is None:
        registry = default_registry()
    if validator is None:
        validator = validator_for(registry.kind_field)

    failures: list[str] = []

    actual_kind = vector.record.get(registry.kind_field)
    if actual_kind != vector.kind:
        failures.append(f"kind: listed under {vector.kind!r} but record is {actual_kind!r}")

    failures.extend(f"structure: {message}" for message in validator.errors(vector.record))

    checks = (
        ("ga4gh_serialize", vector.expected_serialize,
         lambda: canonicalize(vector.record, registry).decode("utf-8")),
        ("ga4gh_digest", vector.expected_digest,
         lambda: ga4gh_digest(vector.record, registry)),
        ("ga4gh_identify", vector.expected_identify,
         lambda: ga4gh_identify(vector.record, registry)),
    )
    for name, expected, compute in checks:
        if expected is None:
            continue
        try:
            actual = compute()
        except Exception as e:
            failures.append(f"{name}: {type(e).__name__}: {e}")
            continue
        if actual != expected:
            failures.append(f"{name}: expected {expected!r}, got {actual!r}")

    return VectorResult(vector=vector, failures=tuple(failures))


def _check_function(vector: ConformanceVector) -> VectorResult:
    function = FUNCTIONS[vector.kind]
    actual = function(vector.record["blob"].encode("utf-8"))
    if actual == vector.expected_output:
        return VectorResult(vector=vector)
    message = f"{vector.kind}: expected {vector.expected_output!r}, got {actual!r}"
    return VectorResult(vector=vector, failures=(message,))


def check_vectors(
    vectors: Iterable[ConformanceVector],
    registry: TypeRegistry | None = None,
) -> ConformanceReport:
    """Check every vector and summarize.

    Parameters
    ----------
    vectors : Iterable[ConformanceVector]
        Vectors to check.
    registry : TypeRegistry | None, optional
        Type Registry, by default the bundled one.

    Returns
    -------
    ConformanceReport
        Per-vector outcomes.
    """
    if registry is None:
        registry = default_registry()
    validator = validator_for(registry.kind_field)
    return ConformanceReport(results=[check_vector(v, registry, validator) for v in vectors])
