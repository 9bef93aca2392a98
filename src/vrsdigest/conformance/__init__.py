"""Conformance checking against published test vectors."""

from vrsdigest.conformance.vectors import (
    FUNCTIONS,
    ConformanceReport,
    ConformanceVector,
    VectorResult,
    check_vector,
    check_vectors,
    load_vectors,
    parse_vectors,
)

__all__ = [
    "FUNCTIONS",
    "ConformanceReport",
    "ConformanceVector",
    "VectorResult",
    "check_vector",
    "check_vectors",
    "load_vectors",
    "parse_vectors",
]
