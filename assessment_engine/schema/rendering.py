"""
Rendering contract.

Maps a field kind to the widget the UI should draw and formats stored answers
for the results view. The engine never depends on widget choice.
"""

from datetime import date, datetime
from typing import Any, Optional

from .answers import format_number, is_blank
from .models import FieldKind, FieldSchema

WIDGETS = {
    FieldKind.TEXT: "text_input",
    FieldKind.NUMBER: "number_input",
    FieldKind.SELECT: "dropdown",
    FieldKind.RADIO: "radio_group",
    FieldKind.CHECKBOX: "checkbox_group",
    FieldKind.TEXTAREA: "text_area",
    FieldKind.DATE: "date_picker",
}


def widget_for(kind: FieldKind) -> str:
    return WIDGETS[FieldKind(kind)]


def display_value(field: Optional[FieldSchema], value: Any) -> str:
    """Render an answer for display. field may be None for stale answer keys."""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value) if value else "None selected"
    if is_blank(value):
        return "Not provided"
    if field is not None and field.kind == FieldKind.DATE:
        if isinstance(value, (date, datetime)):
            return value.strftime("%Y-%m-%d")
        try:
            return datetime.fromisoformat(str(value).strip().replace("Z", "+00:00")).strftime("%Y-%m-%d")
        except ValueError:
            return str(value)
    return str(value)


def range_hint(field: FieldSchema) -> Optional[str]:
    bounds = field.bounds
    if field.kind != FieldKind.NUMBER or bounds is None:
        return None
    if bounds.min is None or bounds.max is None:
        return None
    return f"Value should be between {format_number(bounds.min)} and {format_number(bounds.max)}"
