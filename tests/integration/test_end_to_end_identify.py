"""Integration tests for end-to-end identification.

This module drives records through canonicalization, identification,
validation and the batch runner together, checking known identifiers.
"""

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from vrsdigest import canonicalize, identify
from vrsdigest.conformance import check_vectors, load_vectors
from vrsdigest.engine import BatchConfig, run_batch
from vrsdigest.validate import default_validator

APOE_ALLELE_ID = "ga4gh:VA.CxiA_hvYbkD8Vqwjhx5AYuyul4mtlkpD"


@pytest.mark.integration
def test_minimal_inline_record() -> None:
    """Test an inline record is order-independent and gets no identifier."""
    record = {"type": "LiteralSequenceExpression", "sequence": "T"}
    reordered = {"sequence": "T", "type": "LiteralSequenceExpression"}

    assert canonicalize(record) == canonicalize(reordered)
    assert canonicalize(record) == b'{"sequence":"T","type":"LiteralSequenceExpression"}'
    assert identify(record) == record


@pytest.mark.integration
def test_apoe_allele_identifier(apoe_allele: dict[str, Any]) -> None:
    """Test the APOE allele is identified end to end and stays valid."""
    assert default_validator().is_valid(apoe_allele)

    identified = identify(apoe_allele)

    assert identified["_id"] == APOE_ALLELE_ID
    assert default_validator().is_valid(identified)


@pytest.mark.integration
def test_scratch_fields_do_not_affect_identity(apoe_allele: dict[str, Any]) -> None:
    """Test alleles differing only in underscore fields share an identifier."""
    left = copy.deepcopy(apoe_allele)
    right = copy.deepcopy(apoe_allele)
    left["_scratch"] = {"source": "left", "weight": 0.25}
    right["_scratch"] = ["right"]
    right["location"]["_comment"] = "annotated"

    assert identify(left)["_id"] == identify(right)["_id"] == APOE_ALLELE_ID


@pytest.mark.integration
def test_batch_output_is_reidentifiable(fixtures_dir: Path, tmp_path: Path) -> None:
    """Test batch output identifies to itself when run again."""
    first = run_batch(fixtures_dir / "alleles.jsonl", BatchConfig(output_dir=tmp_path / "one"))
    first_path = Path(first.output_files["identified"])

    second = run_batch(first_path, BatchConfig(output_dir=tmp_path / "two", validate=True))
    second_path = Path(second.output_files["identified"])

    assert first.identified == 3
    assert second.identified == 2
    assert second.invalid == 1

    first_records = [json.loads(line) for line in first_path.read_text("utf-8").splitlines()]
    second_records = [json.loads(line) for line in second_path.read_text("utf-8").splitlines()]
    assert second_records == first_records[:2]


@pytest.mark.integration
def test_fixture_vectors_conform(fixtures_dir: Path) -> None:
    """Test the fixture conformance document passes in full."""
    report = check_vectors(load_vectors(fixtures_dir / "vectors.yaml"))

    assert report.success, report.to_dict()["failures"]
