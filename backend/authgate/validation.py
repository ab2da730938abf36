"""
AuthGate Backend — Request Body Validation
===========================================

What:  A pure function mapping a raw decoded body to a tagged result.
Why:   Keeps validation independent of FastAPI, so it can be unit-tested with
       plain dicts and reused outside the HTTP layer.
How:   Runs a pydantic model over the input and flattens every pydantic error
       into a `FieldError(field, message)`.

    validate_payload(RegisterRequest, {"email": "nope", "password": "x"})
    → ValidationResult(ok=False, errors=[
          FieldError(field="email", message="value is not a valid email address: ..."),
          FieldError(field="password", message="String should have at least 8 characters"),
      ])
"""

from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel

from authgate.exceptions import FieldError

ModelT = TypeVar("ModelT", bound=BaseModel)

BODY_FIELD = "body"


@dataclass(frozen=True)
class ValidationResult(Generic[ModelT]):
    """Either `ok` with a typed `value`, or not ok with at least one error."""

    ok: bool
    value: Optional[ModelT] = None
    errors: List[FieldError] = field(default_factory=list)

    @classmethod
    def success(cls, value: ModelT) -> "ValidationResult[ModelT]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, errors: List[FieldError]) -> "ValidationResult[ModelT]":
        return cls(ok=False, errors=errors)


def _field_name(loc: tuple) -> str:
    if not loc:
        return BODY_FIELD
    return ".".join(str(part) for part in loc)


def errors_from_pydantic(exc: pydantic.ValidationError) -> List[FieldError]:
    """Flattens a pydantic ValidationError, one FieldError per failure."""
    return [
        FieldError(field=_field_name(tuple(err.get("loc", ()))), message=err["msg"])
        for err in exc.errors(include_url=False)
    ]


def validate_payload(schema: Type[ModelT], raw: Any) -> ValidationResult[ModelT]:
    """
    Validate a decoded JSON body against `schema`.

    Args:
        schema: A pydantic model class (extra="forbid" on sensitive endpoints)
        raw:    Whatever json.loads produced; non-objects are rejected

    Returns:
        ValidationResult with the normalized model, or every field error.
    """
    if not isinstance(raw, dict):
        return ValidationResult.failure(
            [FieldError(field=BODY_FIELD, message="Request body must be a JSON object")]
        )
    try:
        return ValidationResult.success(schema.model_validate(raw))
    except pydantic.ValidationError as exc:
        return ValidationResult.failure(errors_from_pydantic(exc))
