"""Tests for canonical serialization."""

from collections.abc import Callable
from typing import Any

import pytest

from vrsdigest.canonical.serializer import canonicalize, dictify
from vrsdigest.identify.assigner import identify
from vrsdigest.models.errors import NotSerializableError, UnknownKindError
from vrsdigest.models.registry import TypeRegistry

DIGEST = "CxiA_hvYbkD8Vqwjhx5AYuyul4mtlkpD"


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_literal_expression_canonical_form() -> None:
    """Test keys are sorted and output is compact."""
    record = {"sequence": "T", "type": "LiteralSequenceExpression"}

    assert canonicalize(record) == b'{"sequence":"T","type":"LiteralSequenceExpression"}'


@pytest.mark.unit
def test_field_order_does_not_matter(apoe_allele: dict[str, Any]) -> None:
    """Test permuting fields at every level yields identical bytes."""
    location = apoe_allele["location"]
    interval = location["interval"]
    permuted = {
        "state": {"sequence": "T", "type": "LiteralSequenceExpression"},
        "location": {
            "interval": {
                "end": interval["end"],
                "type": "SequenceInterval",
                "start": interval["start"],
            },
            "sequence_id": location["sequence_id"],
            "type": "SequenceLocation",
        },
        "type": "Allele",
    }

    assert canonicalize(permuted) == canonicalize(apoe_allele)


@pytest.mark.unit
def test_integers_and_booleans() -> None:
    """Test integers and booleans use plain JSON forms."""
    assert canonicalize({"b": True, "a": 0, "c": -12}) == b'{"a":0,"b":true,"c":-12}'


@pytest.mark.unit
def test_non_ascii_and_slash_unescaped() -> None:
    """Test text is emitted as UTF-8 without escaping."""
    result = canonicalize({"definition": "café/β"})

    assert result == '{"definition":"café/β"}'.encode()


# ---------------------------------------------------------------------------
# Exclusions and references
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_underscore_fields_are_excluded(apoe_allele: dict[str, Any]) -> None:
    """Test underscore-prefixed fields never reach the canonical form."""
    annotated = dict(apoe_allele, _id="ga4gh:VA.whatever", _note={"score": 0.5})
    annotated["location"] = dict(apoe_allele["location"], _scratch=[1.5, None])

    assert canonicalize(annotated) == canonicalize(apoe_allele)


@pytest.mark.unit
def test_reference_tokens_are_stripped_to_digest() -> None:
    """Test registered references serialize as their bare digest."""
    result = canonicalize({"location": f"ga4gh:VSL.{DIGEST}"})

    assert result == f'{{"location":"{DIGEST}"}}'.encode()


@pytest.mark.unit
@pytest.mark.parametrize(
    "value",
    [
        f"ga4gh:XX.{DIGEST}",
        f"ga4gh:VA.{DIGEST[:-2]}",
        f"refseq:NC_000019.{DIGEST}",
        "ga4gh:VA",
    ],
)
def test_malformed_references_pass_through(value: str) -> None:
    """Test strings that only resemble references stay untouched."""
    assert canonicalize({"x": value}) == f'{{"x":"{value}"}}'.encode()


@pytest.mark.unit
def test_root_record_is_never_reduced(apoe_allele: dict[str, Any]) -> None:
    """Test an addressable root serializes as a JSON object."""
    result = canonicalize(apoe_allele)

    assert result.startswith(b'{"location":"')
    assert result.endswith(b'"type":"Allele"}')


@pytest.mark.unit
def test_inline_child_equals_reference_child(apoe_allele: dict[str, Any]) -> None:
    """Test an inline addressable child and its reference are interchangeable."""
    location_id = identify(apoe_allele["location"])["_id"]
    by_reference = dict(apoe_allele, location=location_id)

    assert canonicalize(by_reference) == canonicalize(apoe_allele)


@pytest.mark.unit
def test_dictify_enref_reduces_addressable_root(apoe_allele: dict[str, Any]) -> None:
    """Test enref=True replaces an addressable value by its digest."""
    assert dictify(apoe_allele, enref=True) == DIGEST


@pytest.mark.unit
def test_dictify_enref_keeps_inline_kinds() -> None:
    """Test enref=True leaves non-addressable records as objects."""
    record = {"type": "Number", "value": 3}

    assert dictify(record, enref=True) == {"type": "Number", "value": 3}


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_string_lists_are_sorted() -> None:
    """Test lists of strings are treated as sets."""
    assert canonicalize({"members": ["b", "a", "c"]}) == b'{"members":["a","b","c"]}'


@pytest.mark.unit
def test_other_lists_keep_order() -> None:
    """Test lists with non-string elements keep their order."""
    assert canonicalize({"values": [3, 1, 2]}) == b'{"values":[3,1,2]}'


@pytest.mark.unit
def test_empty_list() -> None:
    """Test empty lists serialize as []."""
    assert canonicalize({"type": "VariationSet", "members": []}) == (
        b'{"members":[],"type":"VariationSet"}'
    )


@pytest.mark.unit
def test_member_order_does_not_matter(make_allele: Callable[..., dict[str, Any]]) -> None:
    """Test addressable members are order-independent once reduced."""
    first = make_allele(44908821, 44908822, "T")
    second = make_allele(44908683, 44908684, "C")

    forward = {"type": "Haplotype", "members": [first, second]}
    backward = {"type": "Haplotype", "members": [second, first]}

    assert canonicalize(forward) == canonicalize(backward)


@pytest.mark.unit
def test_mixed_inline_and_reference_members(make_allele: Callable[..., dict[str, Any]]) -> None:
    """Test a member given inline or by reference sorts identically."""
    first = make_allele(44908821, 44908822, "T")
    second = make_allele(44908683, 44908684, "C")
    second_id = identify(second)["_id"]

    inline = {"type": "Haplotype", "members": [first, second]}
    mixed = {"type": "Haplotype", "members": [second_id, first]}

    assert canonicalize(mixed) == canonicalize(inline)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("record", "path", "value_type"),
    [
        ({"type": "Number", "value": 1.5}, "value", "float"),
        ({"location": {"interval": {"start": None}}}, "location.interval.start", "NoneType"),
        ({"members": ["a", 2.0]}, "members[1]", "float"),
        ({"tags": {"a", "b"}}, "tags", "set"),
    ],
)
def test_unserializable_values(record: dict[str, Any], path: str, value_type: str) -> None:
    """Test unsupported values raise with their field path."""
    with pytest.raises(NotSerializableError) as exc_info:
        canonicalize(record)

    assert exc_info.value.path == path
    assert exc_info.value.value_type == value_type


@pytest.mark.unit
def test_non_string_key() -> None:
    """Test mapping keys must be strings."""
    with pytest.raises(NotSerializableError, match="keys must be strings"):
        canonicalize({1: "a"})


@pytest.mark.unit
def test_unknown_nested_kind() -> None:
    """Test unknown kinds are reported at their path."""
    record = {"type": "Allele", "state": {"type": "Mystery", "sequence": "T"}}

    with pytest.raises(UnknownKindError) as exc_info:
        canonicalize(record)

    assert exc_info.value.path == "state"


@pytest.mark.unit
def test_custom_registry(registry: TypeRegistry) -> None:
    """Test an explicit registry is honored."""
    assert canonicalize({"type": "Number", "value": 1}, registry) == b'{"type":"Number","value":1}'
