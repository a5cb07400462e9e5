"""
Field Validation Tests

Validates:
- Required-but-blank rejection for every field kind
- Number parsing (NotANumber) and inclusive bounds (BelowMin / AboveMax)
- Rule order: required check wins over type and range checks
- Free-form kinds accepted as-is; pattern is never evaluated
- Whole-submission validation reports every failing field
- Reactive error clearing touches only the edited field

Version: validation_v1
"""

from datetime import datetime, timezone

import pytest

from assessment_engine.errors import ErrorKind
from assessment_engine.schema.models import (
    AssessmentSchema,
    FieldBounds,
    FieldKind,
    FieldSchema,
)
from assessment_engine.validation import (
    clear_field_error,
    error_message,
    validate_answers,
    validate_field,
)


NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_field(kind: FieldKind, required: bool = True, **kwargs) -> FieldSchema:
    if kind in (FieldKind.SELECT, FieldKind.RADIO, FieldKind.CHECKBOX):
        kwargs.setdefault("options", ["A", "B"])
    return FieldSchema(id=f"f_{kind.value}", label=kind.value.title(), kind=kind, required=required, **kwargs)


@pytest.fixture
def age_field() -> FieldSchema:
    return FieldSchema(
        id="age",
        label="Age",
        kind=FieldKind.NUMBER,
        required=True,
        bounds=FieldBounds(min=1, max=120),
    )


# ============================================================
# REQUIRED CHECK
# ============================================================

class TestRequired:
    """Required + blank is always MissingRequired, whatever the kind."""

    @pytest.mark.parametrize("kind", list(FieldKind))
    @pytest.mark.parametrize("blank", [None, "", "   ", []])
    def test_required_blank_rejected_for_every_kind(self, kind, blank):
        outcome = validate_field(make_field(kind), blank)
        assert not outcome.ok
        assert outcome.reason == ErrorKind.MISSING_REQUIRED
        assert outcome.message == "This field is required"

    @pytest.mark.parametrize("kind", list(FieldKind))
    def test_optional_blank_accepted(self, kind):
        assert validate_field(make_field(kind, required=False), None).ok
        assert validate_field(make_field(kind, required=False), "").ok

    def test_zero_is_not_blank(self, age_field):
        field = age_field.model_copy(update={"bounds": FieldBounds(min=0, max=10)})
        assert validate_field(field, 0).ok
        assert validate_field(field, "0").ok

    def test_required_wins_over_number_check(self, age_field):
        outcome = validate_field(age_field, "")
        assert outcome.reason == ErrorKind.MISSING_REQUIRED


# ============================================================
# NUMBER PARSING
# ============================================================

class TestNumberParsing:

    @pytest.mark.parametrize("value", ["abc", "12abc", "nan", "inf", "-inf", True, {"x": 1}])
    def test_unparseable_rejected(self, age_field, value):
        outcome = validate_field(age_field, value)
        assert outcome.reason == ErrorKind.NOT_A_NUMBER
        assert outcome.message == "Please enter a valid number"

    @pytest.mark.parametrize("value", [45, 45.5, "45", " 45 ", "4.5e1"])
    def test_numeric_values_accepted(self, age_field, value):
        assert validate_field(age_field, value).ok

    def test_integer_too_large_for_float_rejected(self, age_field):
        outcome = validate_field(age_field, 10 ** 400)
        assert outcome.reason == ErrorKind.NOT_A_NUMBER
        assert validate_field(age_field, -(10 ** 400)).reason == ErrorKind.NOT_A_NUMBER

    def test_optional_number_with_garbage_still_rejected(self):
        field = make_field(FieldKind.NUMBER, required=False)
        assert validate_field(field, "twelve").reason == ErrorKind.NOT_A_NUMBER

    def test_number_without_bounds_accepts_any_finite(self):
        field = make_field(FieldKind.NUMBER)
        assert validate_field(field, -1e9).ok
        assert validate_field(field, 1e9).ok


# ============================================================
# BOUNDS
# ============================================================

class TestBounds:
    """Bounds accept exactly the closed interval [min, max]."""

    @pytest.mark.parametrize("value", [1, 1.0, "1", 60, 119.99, 120, "120"])
    def test_inside_closed_interval(self, age_field, value):
        assert validate_field(age_field, value).ok

    @pytest.mark.parametrize("value", [0, 0.999, "-5"])
    def test_below_min(self, age_field, value):
        outcome = validate_field(age_field, value)
        assert outcome.reason == ErrorKind.BELOW_MIN
        assert outcome.message == "Value must be at least 1"

    @pytest.mark.parametrize("value", [120.001, 121, "130"])
    def test_above_max(self, age_field, value):
        outcome = validate_field(age_field, value)
        assert outcome.reason == ErrorKind.ABOVE_MAX
        assert outcome.message == "Value must be at most 120"

    def test_min_only(self):
        field = make_field(FieldKind.NUMBER, bounds=FieldBounds(min=10))
        assert validate_field(field, 9).reason == ErrorKind.BELOW_MIN
        assert validate_field(field, 10_000).ok

    def test_max_only(self):
        field = make_field(FieldKind.NUMBER, bounds=FieldBounds(max=10))
        assert validate_field(field, 11).reason == ErrorKind.ABOVE_MAX
        assert validate_field(field, -10_000).ok

    def test_bounds_ignored_for_text(self):
        field = make_field(FieldKind.TEXT, bounds=FieldBounds(min=5, max=6))
        assert validate_field(field, "1").ok

    def test_fractional_bound_message(self):
        field = make_field(FieldKind.NUMBER, bounds=FieldBounds(min=0.5))
        assert error_message(field, ErrorKind.BELOW_MIN) == "Value must be at least 0.5"


# ============================================================
# FREE-FORM KINDS
# ============================================================

class TestFreeFormKinds:

    def test_text_accepted_as_is(self):
        assert validate_field(make_field(FieldKind.TEXT), "anything at all").ok

    def test_pattern_is_never_evaluated(self):
        field = make_field(FieldKind.TEXT, pattern=r"^\d+$")
        assert validate_field(field, "not digits").ok

    def test_choice_value_outside_options_accepted(self):
        assert validate_field(make_field(FieldKind.SELECT), "Z").ok

    def test_checkbox_selection_accepted(self):
        assert validate_field(make_field(FieldKind.CHECKBOX), ["A", "B"]).ok

    def test_date_string_accepted(self):
        assert validate_field(make_field(FieldKind.DATE), "2024-02-30").ok


# ============================================================
# SUBMISSION VALIDATION
# ============================================================

class TestValidateAnswers:

    @pytest.fixture
    def schema(self, age_field) -> AssessmentSchema:
        return AssessmentSchema(
            id="as_test",
            title="Test",
            fields=[
                age_field,
                FieldSchema(id="name", label="Name", kind=FieldKind.TEXT, required=True),
                FieldSchema(id="notes", label="Notes", kind=FieldKind.TEXTAREA),
                FieldSchema(id="weight", label="Weight", kind=FieldKind.NUMBER, bounds=FieldBounds(min=20)),
            ],
            created_at=NOW,
            updated_at=NOW,
        )

    def test_all_valid(self, schema):
        result = validate_answers(schema, {"age": 30, "name": "Ada"})
        assert result.is_valid
        assert result.errors == []

    def test_every_failure_reported_in_field_order(self, schema):
        result = validate_answers(schema, {"age": 130, "weight": "10"})
        assert not result.is_valid
        assert [e.field_id for e in result.errors] == ["age", "name", "weight"]
        assert result.as_map() == {
            "age": ErrorKind.ABOVE_MAX,
            "name": ErrorKind.MISSING_REQUIRED,
            "weight": ErrorKind.BELOW_MIN,
        }

    def test_none_answers_treated_as_empty(self, schema):
        result = validate_answers(schema, None)
        assert set(result.as_map()) == {"age", "name"}

    def test_unknown_keys_ignored(self, schema):
        result = validate_answers(schema, {"age": 30, "name": "Ada", "bogus": "x"})
        assert result.is_valid


# ============================================================
# REACTIVE CLEARING
# ============================================================

class TestClearFieldError:

    def test_only_edited_field_cleared(self):
        errors = {"age": ErrorKind.ABOVE_MAX, "name": ErrorKind.MISSING_REQUIRED}
        cleared = clear_field_error(errors, "age")
        assert cleared == {"name": ErrorKind.MISSING_REQUIRED}

    def test_input_not_mutated(self):
        errors = {"age": "Value must be at most 120"}
        clear_field_error(errors, "age")
        assert errors == {"age": "Value must be at most 120"}

    def test_clearing_absent_field_is_noop(self):
        assert clear_field_error({"a": 1}, "b") == {"a": 1}
