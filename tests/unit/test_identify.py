"""Tests for the Digest Engine and Identifier Assigner."""

import copy
from collections.abc import Callable
from typing import Any

import pytest

from vrsdigest.canonical.serializer import canonicalize
from vrsdigest.identify import ga4gh_digest, ga4gh_identify, identify, identify_all
from vrsdigest.models.errors import NotSerializableError, UnknownKindError
from vrsdigest.utils.hashing import is_digest, sha512t24u

APOE_ALLELE_ID = "ga4gh:VA.CxiA_hvYbkD8Vqwjhx5AYuyul4mtlkpD"
APOE_LOCATION_ID = "ga4gh:VSL.QrRSuBj-VScAGV_gEdxNgsnh41jYH1Kg"


# ---------------------------------------------------------------------------
# ga4gh_digest / ga4gh_identify
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_ga4gh_identify_apoe_allele(apoe_allele: dict[str, Any]) -> None:
    """Test the APOE allele and its location canonicalize to the expected bytes."""
    assert canonicalize(apoe_allele["location"]) == (
        b'{"interval":{"end":{"type":"Number","value":44908822},'
        b'"start":{"type":"Number","value":44908821},"type":"SequenceInterval"},'
        b'"sequence_id":"IIB53T8CNeJJdUqzn9V_JnRtQadwWCbl","type":"SequenceLocation"}'
    )
    assert canonicalize(apoe_allele) == (
        b'{"location":"QrRSuBj-VScAGV_gEdxNgsnh41jYH1Kg",'
        b'"state":{"sequence":"T","type":"LiteralSequenceExpression"},"type":"Allele"}'
    )
    assert ga4gh_identify(apoe_allele["location"]) == APOE_LOCATION_ID
    assert ga4gh_identify(apoe_allele) == APOE_ALLELE_ID


@pytest.mark.unit
def test_ga4gh_identify_vrs_1_1_published_values() -> None:
    """Test the VRS 1.1 APOE location and allele identifiers are reproduced."""
    location = {
        "type": "SequenceLocation",
        "sequence_id": "ga4gh:SQ.IIB53T8CNeJJdUqzn9V_JnRtQadwWCbl",
        "interval": {"type": "SimpleInterval", "start": 44908821, "end": 44908822},
    }
    allele = {
        "type": "Allele",
        "location": location,
        "state": {"type": "SequenceState", "sequence": "T"},
    }

    assert ga4gh_identify(location) == "ga4gh:VSL.u5fspwVbQ79QkX6GHLF8tXPCAXFJqRPx"
    assert ga4gh_identify(allele) == "ga4gh:VA.EgHPXXhULTwoP4-ACfs-YCXaeUQJBjH_"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("start", "expected"),
    [
        (44908821, "ga4gh:VA.-kUJh47Pu24Y3Wdsk1rXEDKsXWNY-68x"),
        (44908683, "ga4gh:VA.Z_rYRxpUvwqCLsCBO3YLl70o2uf9_Op1"),
    ],
)
def test_ga4gh_identify_published_haplotype_members(
    make_allele: Callable[..., dict[str, Any]], start: int, expected: str
) -> None:
    """Test the published Haplotype member alleles are reproduced."""
    assert ga4gh_identify(make_allele(start, start + 1, "C")) == expected


@pytest.mark.unit
def test_ga4gh_digest_is_identifier_tail(apoe_allele: dict[str, Any]) -> None:
    """Test the digest is the trailing part of the identifier."""
    assert ga4gh_digest(apoe_allele) == APOE_ALLELE_ID.split(".", 1)[1]


@pytest.mark.unit
def test_ga4gh_digest_of_inline_kind() -> None:
    """Test non-addressable records still have a digest."""
    record = {"type": "LiteralSequenceExpression", "sequence": "T"}

    digest = ga4gh_digest(record)

    assert is_digest(digest)
    assert digest == sha512t24u(b'{"sequence":"T","type":"LiteralSequenceExpression"}')


@pytest.mark.unit
def test_ga4gh_identify_inline_kind_raises() -> None:
    """Test identifying a non-addressable record is an error."""
    with pytest.raises(ValueError, match="not content-addressable"):
        ga4gh_identify({"type": "Number", "value": 1})


@pytest.mark.unit
def test_ga4gh_identify_without_kind_raises() -> None:
    """Test identifying a record without a kind is an error."""
    with pytest.raises(ValueError, match="no 'type' field"):
        ga4gh_identify({"value": 1})


@pytest.mark.unit
def test_ga4gh_identify_unknown_kind_raises() -> None:
    """Test identifying an unregistered kind raises UnknownKindError."""
    with pytest.raises(UnknownKindError):
        ga4gh_identify({"type": "Mystery"})


@pytest.mark.unit
def test_ga4gh_identify_ignores_existing_identifier(apoe_allele: dict[str, Any]) -> None:
    """Test a stale identifier on the record does not change the result."""
    apoe_allele["_id"] = "ga4gh:VA.stale"

    assert ga4gh_identify(apoe_allele) == APOE_ALLELE_ID


# ---------------------------------------------------------------------------
# identify
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_identify_assigns_root_and_nested(apoe_allele: dict[str, Any]) -> None:
    """Test every addressable node receives an identifier."""
    result = identify(apoe_allele)

    assert result["_id"] == APOE_ALLELE_ID
    location = result["location"]
    assert location["_id"].startswith("ga4gh:VSL.")
    assert location["_id"] == ga4gh_identify(apoe_allele["location"])


@pytest.mark.unit
def test_identify_leaves_inline_kinds_alone(apoe_allele: dict[str, Any]) -> None:
    """Test non-addressable nodes get no identifier."""
    result = identify(apoe_allele)

    assert "_id" not in result["state"]
    assert "_id" not in result["location"]["interval"]
    assert "_id" not in result["location"]["interval"]["start"]


@pytest.mark.unit
def test_identify_keeps_sequence_reference(apoe_allele: dict[str, Any]) -> None:
    """Test reference strings are carried over verbatim."""
    result = identify(apoe_allele)

    assert result["location"]["sequence_id"] == apoe_allele["location"]["sequence_id"]


@pytest.mark.unit
def test_identify_does_not_mutate_input(apoe_allele: dict[str, Any]) -> None:
    """Test the input tree is left untouched."""
    before = copy.deepcopy(apoe_allele)

    identify(apoe_allele)

    assert apoe_allele == before


@pytest.mark.unit
def test_identify_is_idempotent(apoe_allele: dict[str, Any]) -> None:
    """Test identifying an identified record changes nothing."""
    once = identify(apoe_allele)

    assert identify(once) == once


@pytest.mark.unit
def test_identify_overwrites_stale_identifiers(apoe_allele: dict[str, Any]) -> None:
    """Test previous identifier values are replaced."""
    apoe_allele["_id"] = "ga4gh:VA.stale"
    apoe_allele["location"]["_id"] = "ga4gh:VSL.stale"

    result = identify(apoe_allele)

    assert result["_id"] == APOE_ALLELE_ID
    assert result["location"]["_id"] != "ga4gh:VSL.stale"


@pytest.mark.unit
def test_identify_preserves_annotations(apoe_allele: dict[str, Any]) -> None:
    """Test underscore fields are copied but never hashed."""
    apoe_allele["_note"] = {"score": 0.75, "tags": None}

    result = identify(apoe_allele)

    assert result["_note"] == {"score": 0.75, "tags": None}
    assert result["_id"] == APOE_ALLELE_ID
    assert result["_note"] is not apoe_allele["_note"]


@pytest.mark.unit
def test_identify_reference_location_matches_inline(apoe_allele: dict[str, Any]) -> None:
    """Test a location given by reference yields the same allele identifier."""
    location_id = identify(apoe_allele)["location"]["_id"]
    by_reference = dict(apoe_allele, location=location_id)

    result = identify(by_reference)

    assert result["_id"] == APOE_ALLELE_ID
    assert result["location"] == location_id


@pytest.mark.unit
def test_identify_inline_root_gets_no_identifier() -> None:
    """Test a non-addressable root is returned without an identifier."""
    record = {"sequence": "T", "type": "LiteralSequenceExpression"}

    result = identify(record)

    assert result == record
    assert "_id" not in result


@pytest.mark.unit
def test_identify_haplotype_members(make_allele: Callable[..., dict[str, Any]]) -> None:
    """Test list members are identified and the container gets its own code."""
    first = make_allele(44908821, 44908822, "T")
    second = make_allele(44908683, 44908684, "C")

    result = identify({"type": "Haplotype", "members": [first, second]})

    assert result["_id"].startswith("ga4gh:VH.")
    assert [m["_id"] for m in result["members"]] == [ga4gh_identify(first), ga4gh_identify(second)]
    assert result["_id"] == identify({"type": "Haplotype", "members": [second, first]})["_id"]


@pytest.mark.unit
def test_identify_digest_matches_canonical_form(apoe_allele: dict[str, Any]) -> None:
    """Test the assigned digest is the digest of the canonical form."""
    result = identify(apoe_allele)

    assert result["_id"].endswith(sha512t24u(canonicalize(apoe_allele)))


@pytest.mark.unit
def test_identify_unknown_kind_aborts(apoe_allele: dict[str, Any]) -> None:
    """Test an unknown nested kind aborts the whole record."""
    apoe_allele["state"]["type"] = "Mystery"

    with pytest.raises(UnknownKindError) as exc_info:
        identify(apoe_allele)

    assert exc_info.value.path == "state"


@pytest.mark.unit
def test_identify_float_reports_path(apoe_allele: dict[str, Any]) -> None:
    """Test unserializable values report their full path."""
    apoe_allele["location"]["interval"]["start"]["value"] = 44908821.0

    with pytest.raises(NotSerializableError) as exc_info:
        identify(apoe_allele)

    assert exc_info.value.path == "location.interval.start.value"


@pytest.mark.unit
def test_identify_rejects_non_mapping_root() -> None:
    """Test the root must be a mapping."""
    with pytest.raises(NotSerializableError):
        identify(["not", "a", "record"])  # type: ignore[arg-type]


@pytest.mark.unit
def test_scratch_fields_do_not_change_identifier(apoe_allele: dict[str, Any]) -> None:
    """Test records differing only in underscore fields share identifiers."""
    annotated = copy.deepcopy(apoe_allele)
    annotated["_source"] = "import-42"

    assert identify(annotated)["_id"] == identify(apoe_allele)["_id"]


# ---------------------------------------------------------------------------
# identify_all
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize("max_workers", [None, 1, 4])
def test_identify_all_preserves_order(
    make_allele: Callable[..., dict[str, Any]], max_workers: int | None
) -> None:
    """Test batch identification matches one-by-one identification."""
    records = [make_allele(start, start + 1, "A") for start in range(100, 120)]

    results = identify_all(records, max_workers=max_workers)

    assert [r["_id"] for r in results] == [ga4gh_identify(r) for r in records]


@pytest.mark.unit
def test_identify_all_propagates_first_failure(make_allele: Callable[..., dict[str, Any]]) -> None:
    """Test a failing record raises from identify_all."""
    records = [make_allele(), {"type": "Mystery"}]

    with pytest.raises(UnknownKindError):
        identify_all(records, max_workers=2)
