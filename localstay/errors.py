"""
Validation errors raised by the store facades.

Every rejected create/update surfaces as a single RecordValidationError
carrying one FieldError per violated rule. Pydantic does the checking;
this module only names what went wrong.
"""
import logging
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Iterable, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
EnumT = TypeVar("EnumT", bound=Enum)


class ErrorKind(str, Enum):
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    INVALID_ENUM_VALUE = "InvalidEnumValue"
    OUT_OF_RANGE_VALUE = "OutOfRangeValue"
    EMPTY_REQUIRED_COLLECTION = "EmptyRequiredCollection"
    INVALID_TYPE = "InvalidType"


_KIND_BY_PYDANTIC_TYPE = {
    "missing": ErrorKind.MISSING_REQUIRED_FIELD,
    # Required text that is empty once trimmed counts as missing
    "string_too_short": ErrorKind.MISSING_REQUIRED_FIELD,
    "enum": ErrorKind.INVALID_ENUM_VALUE,
    "literal_error": ErrorKind.INVALID_ENUM_VALUE,
    "greater_than": ErrorKind.OUT_OF_RANGE_VALUE,
    "greater_than_equal": ErrorKind.OUT_OF_RANGE_VALUE,
    "less_than": ErrorKind.OUT_OF_RANGE_VALUE,
    "less_than_equal": ErrorKind.OUT_OF_RANGE_VALUE,
    "string_too_long": ErrorKind.OUT_OF_RANGE_VALUE,
    "too_short": ErrorKind.EMPTY_REQUIRED_COLLECTION,
}


@dataclass(frozen=True)
class FieldError:
    kind: ErrorKind
    field: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


class RecordValidationError(ValueError):
    def __init__(self, errors: Iterable[FieldError]):
        self.errors = list(errors)
        super().__init__("; ".join(f"{e.field}: {e.kind.value}" for e in self.errors))

    @property
    def kinds(self) -> set[ErrorKind]:
        return {e.kind for e in self.errors}

    def to_list(self) -> list[dict[str, Any]]:
        return [e.to_dict() for e in self.errors]


def _field_path(loc: tuple, skip: int = 0) -> str:
    return ".".join(str(part) for part in loc[skip:])


def classify(error: dict[str, Any], skip: int = 0) -> FieldError:
    """Map a single pydantic error dict onto a FieldError."""
    if "input" in error and error["input"] is None:
        # An explicit null where a value is required counts as missing
        kind = ErrorKind.MISSING_REQUIRED_FIELD
    else:
        kind = _KIND_BY_PYDANTIC_TYPE.get(error["type"], ErrorKind.INVALID_TYPE)
    return FieldError(kind=kind, field=_field_path(tuple(error["loc"]), skip), message=error["msg"])


def from_pydantic(exc: ValidationError) -> RecordValidationError:
    return RecordValidationError(classify(e) for e in exc.errors())


def from_request_errors(errors: Iterable[dict[str, Any]]) -> RecordValidationError:
    # FastAPI prefixes each loc with where it came from ("body", "query", "path")
    return RecordValidationError(classify(e, skip=1) for e in errors)


def parse_input(schema: type[ModelT], data: Any) -> ModelT:
    """Validate raw input against a schema, raising RecordValidationError on failure."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        error = from_pydantic(exc)
        logger.warning("Rejected %s input: %s", schema.__name__, error)
        raise error from exc


def reject_null_required(payload: BaseModel, required: Iterable[str]) -> None:
    """A partial update may omit a required field but may not clear it."""
    fields = type(payload).model_fields
    errors = [
        FieldError(ErrorKind.MISSING_REQUIRED_FIELD, fields[name].alias or name, "Field required")
        for name in required
        if name in payload.model_fields_set and getattr(payload, name) is None
    ]
    if errors:
        error = RecordValidationError(errors)
        logger.warning("Rejected %s input: %s", type(payload).__name__, error)
        raise error


def coerce_enum(enum_cls: type[EnumT], value: Any, field: str) -> EnumT:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(repr(m.value) for m in enum_cls)
        raise RecordValidationError(
            [FieldError(ErrorKind.INVALID_ENUM_VALUE, field, f"Input should be {allowed}")]
        ) from None
