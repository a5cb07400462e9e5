"""
Field Validation

One algorithm for every field kind. Rules, first match wins:
1. Required but blank            -> MissingRequired
2. Number that does not parse    -> NotANumber
3. Number below / above bounds   -> BelowMin / AboveMax
4. Otherwise                     -> Ok

Text, date and choice answers are accepted as-is. FieldSchema.pattern is
reserved and never evaluated.

PURE: no side effects, never raises for malformed input.

Version: validation_v1
"""

from typing import Any, Dict, Mapping, Optional, TypeVar

from assessment_engine.errors import ErrorKind
from assessment_engine.schema.answers import format_number, is_blank, parse_number
from assessment_engine.schema.models import AssessmentSchema, FieldKind, FieldSchema

from .models import FieldError, SubmissionValidation, ValidationOutcome

T = TypeVar("T")


def error_message(field: FieldSchema, kind: ErrorKind) -> str:
    """Human-readable text for a rejection."""
    bounds = field.bounds
    if kind == ErrorKind.MISSING_REQUIRED:
        return "This field is required"
    if kind == ErrorKind.NOT_A_NUMBER:
        return "Please enter a valid number"
    if kind == ErrorKind.BELOW_MIN and bounds is not None and bounds.min is not None:
        return f"Value must be at least {format_number(bounds.min)}"
    if kind == ErrorKind.ABOVE_MAX and bounds is not None and bounds.max is not None:
        return f"Value must be at most {format_number(bounds.max)}"
    return kind.value


def _reject(field: FieldSchema, kind: ErrorKind) -> ValidationOutcome:
    return ValidationOutcome.rejected(kind, error_message(field, kind))


def validate_field(field: FieldSchema, value: Any) -> ValidationOutcome:
    """Decide whether a candidate value is acceptable for a field."""
    blank = is_blank(value)

    if field.required and blank:
        return _reject(field, ErrorKind.MISSING_REQUIRED)

    if field.kind != FieldKind.NUMBER or blank:
        return ValidationOutcome.accepted()

    number = parse_number(value)
    if number is None:
        return _reject(field, ErrorKind.NOT_A_NUMBER)

    bounds = field.bounds
    if bounds is not None:
        if bounds.min is not None and number < bounds.min:
            return _reject(field, ErrorKind.BELOW_MIN)
        if bounds.max is not None and number > bounds.max:
            return _reject(field, ErrorKind.ABOVE_MAX)

    return ValidationOutcome.accepted()


def validate_answers(schema: AssessmentSchema, answers: Optional[Mapping[str, Any]]) -> SubmissionValidation:
    """
    Validate every field of the schema against the answer map.

    Returns all failures, not just the first. Keys in answers that do not
    belong to the schema are ignored here.
    """
    answers = answers or {}
    errors = []
    for field in schema.fields:
        outcome = validate_field(field, answers.get(field.id))
        if not outcome.ok:
            errors.append(FieldError(
                field_id=field.id,
                reason=outcome.reason,
                message=outcome.message,
            ))
    return SubmissionValidation(schema_id=schema.id, errors=errors)


def clear_field_error(errors: Mapping[str, T], field_id: str) -> Dict[str, T]:
    """
    Drop the error for one field after its value changed.

    Other fields keep their errors untouched and are not re-validated.
    """
    return {k: v for k, v in errors.items() if k != field_id}
