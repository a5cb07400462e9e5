"""
Rendering Contract Tests

Widget mapping per field kind and display formatting of stored answers.
"""

from datetime import date

import pytest

from assessment_engine.schema import FieldBounds, FieldKind, FieldSchema, display_value, range_hint, widget_for


def field(kind: FieldKind, **kwargs) -> FieldSchema:
    if kind in (FieldKind.SELECT, FieldKind.RADIO, FieldKind.CHECKBOX):
        kwargs.setdefault("options", ["A", "B"])
    return FieldSchema(id="f", label="F", kind=kind, **kwargs)


class TestWidgets:

    def test_every_kind_has_a_widget(self):
        assert {widget_for(kind) for kind in FieldKind} == {
            "text_input", "number_input", "dropdown", "radio_group",
            "checkbox_group", "text_area", "date_picker",
        }

    def test_accepts_raw_value(self):
        assert widget_for("checkbox") == "checkbox_group"


class TestDisplayValue:

    @pytest.mark.parametrize("value,expected", [
        (None, "Not provided"),
        ("", "Not provided"),
        ("  ", "Not provided"),
        ([], "None selected"),
        (["A", "B"], "A, B"),
        ("hello", "hello"),
        (42, "42"),
        (0, "0"),
    ])
    def test_values(self, value, expected):
        assert display_value(field(FieldKind.TEXT), value) == expected

    def test_date_normalized(self):
        assert display_value(field(FieldKind.DATE), "2024-03-01T09:30:00Z") == "2024-03-01"
        assert display_value(field(FieldKind.DATE), date(2024, 3, 1)) == "2024-03-01"

    def test_unparseable_date_shown_as_is(self):
        assert display_value(field(FieldKind.DATE), "next tuesday") == "next tuesday"

    def test_without_field(self):
        assert display_value(None, "stale") == "stale"


class TestRangeHint:

    def test_number_with_both_bounds(self):
        f = field(FieldKind.NUMBER, bounds=FieldBounds(min=1, max=120))
        assert range_hint(f) == "Value should be between 1 and 120"

    def test_partial_bounds_no_hint(self):
        assert range_hint(field(FieldKind.NUMBER, bounds=FieldBounds(min=1))) is None

    def test_non_number_no_hint(self):
        assert range_hint(field(FieldKind.TEXT, bounds=FieldBounds(min=1, max=2))) is None
