import pytest
from pydantic import ValidationError

from localstay.errors import (
    ErrorKind,
    FieldError,
    RecordValidationError,
    classify,
    coerce_enum,
    from_request_errors,
    parse_input,
)
from localstay.models import HomestayStatus
from localstay.schemas import GuideUpdate, HomestayCreate


@pytest.mark.parametrize(
    "error_type, kind",
    [
        ("missing", ErrorKind.MISSING_REQUIRED_FIELD),
        ("string_too_short", ErrorKind.MISSING_REQUIRED_FIELD),
        ("enum", ErrorKind.INVALID_ENUM_VALUE),
        ("greater_than_equal", ErrorKind.OUT_OF_RANGE_VALUE),
        ("string_too_long", ErrorKind.OUT_OF_RANGE_VALUE),
        ("too_short", ErrorKind.EMPTY_REQUIRED_COLLECTION),
        ("float_parsing", ErrorKind.INVALID_TYPE),
    ],
)
def test_classify(error_type, kind):
    error = classify({"type": error_type, "loc": ("pricing", "basePrice"), "msg": "bad"})
    assert error == FieldError(kind, "pricing.basePrice", "bad")


def test_request_errors_drop_the_source_prefix():
    error = from_request_errors([{"type": "enum", "loc": ("query", "status"), "msg": "bad"}])
    assert error.errors == [FieldError(ErrorKind.INVALID_ENUM_VALUE, "status", "bad")]


def test_parse_input_collects_every_violation():
    with pytest.raises(RecordValidationError) as exc_info:
        parse_input(HomestayCreate, {"title": "", "pricing": {"basePrice": 10}})
    assert isinstance(exc_info.value.__cause__, ValidationError)
    assert exc_info.value.kinds == {ErrorKind.MISSING_REQUIRED_FIELD, ErrorKind.OUT_OF_RANGE_VALUE}
    fields = {e.field for e in exc_info.value.errors}
    assert {"title", "description", "location", "capacity", "pricing.basePrice"} <= fields


def test_parse_input_passes_models_through():
    payload = GuideUpdate(availability="busy")
    assert parse_input(GuideUpdate, payload) is payload


def test_to_list_is_json_ready():
    error = RecordValidationError([FieldError(ErrorKind.EMPTY_REQUIRED_COLLECTION, "languages", "too short")])
    assert error.to_list() == [{"kind": "EmptyRequiredCollection", "field": "languages", "message": "too short"}]
    assert "languages" in str(error)


def test_coerce_enum():
    assert coerce_enum(HomestayStatus, "inactive", "status") is HomestayStatus.INACTIVE
    with pytest.raises(RecordValidationError) as exc_info:
        coerce_enum(HomestayStatus, "archived", "status")
    assert exc_info.value.kinds == {ErrorKind.INVALID_ENUM_VALUE}


@pytest.mark.parametrize("error_type", ["string_type", "model_type", "list_type", "float_type", "enum"])
def test_classify_treats_null_input_as_missing(error_type):
    error = classify({"type": error_type, "loc": ("body", "pricing", "halfDay"), "msg": "bad", "input": None}, skip=1)
    assert error == FieldError(ErrorKind.MISSING_REQUIRED_FIELD, "pricing.halfDay", "bad")


def test_classify_keeps_type_errors_for_non_null_input():
    error = classify({"type": "float_parsing", "loc": ("pricing", "halfDay"), "msg": "bad", "input": "cheap"})
    assert error.kind == ErrorKind.INVALID_TYPE
