"""Tests for response extraction."""

import json

import pytest

from nutrition_planner.domain.errors import MalformedSyntax, NoStructureFound
from nutrition_planner.services.extraction import extract
from nutrition_planner.services.validation import PayloadKind, validate
from tests.conftest import as_model_text, estimate_payload


def test_extract_from_code_fence_with_prose() -> None:
    assert extract('Sure! ```json\n{"a":1}\n```') == {"a": 1}


def test_extract_plain_object() -> None:
    assert extract('  {"a": {"b": [1, 2]}}\n') == {"a": {"b": [1, 2]}}


def test_extract_ignores_trailing_prose_with_braces() -> None:
    text = '{"a": 1}\nLet me know if you want {more} options.'

    assert extract(text) == {"a": 1}


def test_extract_skips_brackets_inside_strings() -> None:
    text = 'Result: {"note": "use } and ] freely", "quote": "say \\"hi\\" {"}'

    assert extract(text) == {"note": "use } and ] freely", "quote": 'say "hi" {'}


def test_no_structure_found() -> None:
    with pytest.raises(NoStructureFound):
        extract("I could not identify any food in this image.")


def test_array_only_response_has_no_object() -> None:
    with pytest.raises(NoStructureFound):
        extract("[1, 2, 3]")


def test_truncated_generation_is_malformed() -> None:
    with pytest.raises(MalformedSyntax):
        extract('{"a": [1,2,')


def test_mismatched_brackets_are_malformed() -> None:
    with pytest.raises(MalformedSyntax):
        extract('{"a": [1, 2}')


def test_invalid_json_inside_span_is_malformed() -> None:
    with pytest.raises(MalformedSyntax):
        extract("{'a': 1}")


def test_non_finite_numbers_are_malformed() -> None:
    with pytest.raises(MalformedSyntax):
        extract('{"calories": NaN}')


def test_extract_then_validate_preserves_values() -> None:
    payload = estimate_payload(protein_g=33.333333333333336, fat_g=0.1)

    estimate = validate(
        extract(as_model_text(payload)), PayloadKind.NUTRITION_ESTIMATE
    )

    assert estimate.model_dump() == payload
    assert estimate.protein_g == 33.333333333333336
    assert json.loads(json.dumps(estimate.model_dump()))["fat_g"] == 0.1
