from __future__ import annotations

import pytest

from signal_relay.schema_utils import InvalidParamsError, normalize_arguments, validate_arguments
from signal_relay.tools import schemas

VALID_UUID = "123e4567-e89b-12d3-a456-426614174000"


def test_defaults_applied():
    args = validate_arguments(schemas.LIST_PERSONAS, {})
    assert args == {"visibility": "public", "page": 1, "per_page": 20}


def test_none_arguments_treated_as_empty():
    assert validate_arguments(schemas.SEARCH_WEB, {"query": "x"}) == {"query": "x", "limit": 5}
    assert validate_arguments(schemas.GET_CREDITS_BALANCE, None) == {}


def test_unknown_fields_stripped():
    args = validate_arguments(schemas.GET_PERSONA, {"slug": "alice", "extra": 1})
    assert args == {"slug": "alice"}


def test_nested_defaults_and_stripping():
    schema = schemas.CREATE_CAMPAIGN
    args = validate_arguments(
        schema,
        {"name": "Pricing", "questions": [{"id": "q1", "text": "Would you pay?", "junk": True}]},
    )
    assert args["questions"] == [{"id": "q1", "text": "Would you pay?", "type": "open", "required": True}]
    assert args["persona_count"] == 10
    assert args["fidelity_tier"] == "enhanced"


def test_default_is_copied():
    first = validate_arguments(schemas.SCRAPE_URL, {"url": "https://example.com"})
    first["formats"].append("html")
    second = validate_arguments(schemas.SCRAPE_URL, {"url": "https://example.com"})
    assert second["formats"] == ["markdown"]


def test_missing_required_names_field():
    with pytest.raises(InvalidParamsError) as info:
        validate_arguments(schemas.INTERVIEW_PERSONA, {"slug": "alice"})
    assert info.value.errors == ["message: Required"]
    assert str(info.value) == "Invalid parameters: message: Required"


def test_multiple_errors_reported():
    with pytest.raises(InvalidParamsError) as info:
        validate_arguments(schemas.LIST_PERSONAS, {"per_page": 500, "visibility": "secret"})
    assert "per_page: Must be less than or equal to 100" in info.value.errors
    assert "visibility: Expected one of: public, private, all" in info.value.errors


def test_type_error_message():
    with pytest.raises(InvalidParamsError) as info:
        validate_arguments(schemas.LIST_PERSONAS, {"page": "two"})
    assert info.value.errors == ["page: Expected integer, received string"]


def test_exclusive_minimum():
    with pytest.raises(InvalidParamsError) as info:
        validate_arguments(schemas.LIST_PERSONAS, {"page": 0})
    assert info.value.errors == ["page: Must be greater than 0"]


def test_string_length_bounds():
    with pytest.raises(InvalidParamsError) as info:
        validate_arguments(schemas.CREATE_PERSONA, {"description": "short"})
    assert info.value.errors == ["description: Must contain at least 10 character(s)"]


def test_uuid_format():
    with pytest.raises(InvalidParamsError) as info:
        validate_arguments(schemas.GET_CAMPAIGN, {"id": "not-a-uuid"})
    assert info.value.errors == ["id: Invalid uuid"]
    assert validate_arguments(schemas.GET_CAMPAIGN, {"id": VALID_UUID}) == {"id": VALID_UUID}


def test_uuid_without_hyphens_rejected():
    with pytest.raises(InvalidParamsError):
        validate_arguments(schemas.GET_CAMPAIGN, {"id": VALID_UUID.replace("-", "")})


def test_uri_format():
    with pytest.raises(InvalidParamsError) as info:
        validate_arguments(schemas.GET_COMPANY_INFO, {"url": "example.com"})
    assert info.value.errors == ["url: Invalid uri"]


def test_array_item_path():
    with pytest.raises(InvalidParamsError) as info:
        validate_arguments(
            schemas.ADD_PERSONAS_TO_FOCUS_GROUP,
            {"focus_group_id": VALID_UUID, "persona_ids": [VALID_UUID, "nope"]},
        )
    assert info.value.errors == ["persona_ids.1: Invalid uuid"]


def test_min_items():
    with pytest.raises(InvalidParamsError) as info:
        validate_arguments(schemas.ADD_PERSONAS_TO_FOCUS_GROUP, {"focus_group_id": VALID_UUID, "persona_ids": []})
    assert info.value.errors == ["persona_ids: Must contain at least 1 item(s)"]


def test_nested_required_path():
    with pytest.raises(InvalidParamsError) as info:
        validate_arguments(
            schemas.CREATE_PERSONA,
            {"description": "A budget-conscious parent", "x402_payment": {"scheme": "exact"}},
        )
    assert info.value.errors == ["x402_payment.payload: Required"]


def test_non_object_arguments():
    with pytest.raises(InvalidParamsError) as info:
        validate_arguments(schemas.GET_PERSONA, ["alice"])
    assert info.value.errors == ["Expected object, received array"]


def test_normalize_leaves_scalars():
    assert normalize_arguments({"type": "string"}, "x") == "x"
    assert normalize_arguments(schemas.GET_PERSONA, "x") == "x"


def test_integral_floats_become_ints():
    args = validate_arguments(schemas.LIST_PERSONAS, {"page": 2.0, "per_page": 50.0})
    assert args["page"] == 2 and type(args["page"]) is int
    assert type(args["per_page"]) is int


def test_fractional_float_rejected_for_integer():
    with pytest.raises(InvalidParamsError) as info:
        validate_arguments(schemas.LIST_PERSONAS, {"page": 2.5})
    assert info.value.errors == ["page: Expected integer, received number"]


def test_number_fields_outside_integer_schemas_untouched():
    assert normalize_arguments({"type": "number"}, 3.0) == 3.0
    assert type(normalize_arguments({"type": "number"}, 3.0)) is float
