"""
Assessment Schema Module

Questionnaires defined as data: typed fields with required-ness, option sets
and numeric bounds, plus the responses submitted against them.

Version: assessment_schema_v1
"""

from .models import (
    CHOICE_KINDS,
    AssessmentSchema,
    AssessmentSchemaDraft,
    AssessmentSchemaUpdate,
    FieldBounds,
    FieldKind,
    FieldSchema,
    FieldUpdate,
    Response,
    ResponseDraft,
)
from .templates import (
    CARDIAC_TEMPLATE_ID,
    HEALTH_FITNESS_TEMPLATE_ID,
    builtin_templates,
    cardiac_template,
    health_fitness_template,
)
from .rendering import display_value, range_hint, widget_for

__all__ = [
    # Models
    "CHOICE_KINDS",
    "AssessmentSchema",
    "AssessmentSchemaDraft",
    "AssessmentSchemaUpdate",
    "FieldBounds",
    "FieldKind",
    "FieldSchema",
    "FieldUpdate",
    "Response",
    "ResponseDraft",
    # Templates
    "CARDIAC_TEMPLATE_ID",
    "HEALTH_FITNESS_TEMPLATE_ID",
    "builtin_templates",
    "cardiac_template",
    "health_fitness_template",
    # Rendering
    "display_value",
    "range_hint",
    "widget_for",
]

__version__ = "assessment_schema_v1"
