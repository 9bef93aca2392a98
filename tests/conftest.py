"""Pytest configuration and fixtures for test suite."""

import copy
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from vrsdigest.models import TypeRegistry, default_registry  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# APOE rs7412 C>T on GRCh38 chr19, VRS 1.2 record shape (SequenceInterval of Numbers)
APOE_SEQUENCE_ID = "ga4gh:SQ.IIB53T8CNeJJdUqzn9V_JnRtQadwWCbl"
APOE_ALLELE_ID = "ga4gh:VA.CxiA_hvYbkD8Vqwjhx5AYuyul4mtlkpD"

_APOE_ALLELE: dict[str, Any] = {
    "type": "Allele",
    "location": {
        "type": "SequenceLocation",
        "sequence_id": APOE_SEQUENCE_ID,
        "interval": {
            "type": "SequenceInterval",
            "start": {"type": "Number", "value": 44908821},
            "end": {"type": "Number", "value": 44908822},
        },
    },
    "state": {"type": "LiteralSequenceExpression", "sequence": "T"},
}


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    """Directory of on-disk test fixtures."""
    return FIXTURES_DIR


@pytest.fixture(scope="session")
def registry() -> TypeRegistry:
    """Bundled VRS 1.x Type Registry."""
    return default_registry()


@pytest.fixture
def apoe_allele() -> dict[str, Any]:
    """Fresh copy of the APOE allele record, safe to mutate."""
    return copy.deepcopy(_APOE_ALLELE)


@pytest.fixture
def make_allele() -> Callable[..., dict[str, Any]]:
    """Factory for allele records on chr19 with minimal boilerplate."""

    def _factory(
        start: int = 44908821,
        end: int = 44908822,
        sequence: str = "T",
        *,
        sequence_id: str = APOE_SEQUENCE_ID,
    ) -> dict[str, Any]:
        return {
            "type": "Allele",
            "location": {
                "type": "SequenceLocation",
                "sequence_id": sequence_id,
                "interval": {
                    "type": "SequenceInterval",
                    "start": {"type": "Number", "value": start},
                    "end": {"type": "Number", "value": end},
                },
            },
            "state": {"type": "LiteralSequenceExpression", "sequence": sequence},
        }

    return _factory
