"""
Assessment Schema Models

Pydantic models for questionnaire definitions and responses:
- FieldSchema: one question (kind, label, required, options, bounds)
- AssessmentSchema: ordered fields plus identity/category metadata
- Response: one respondent's completed answer set plus score

The JSON dump of these models is the persisted form.

Version: assessment_schema_v1
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class FieldKind(str, Enum):
    """Closed set of field kinds. The rendering layer maps each to a widget."""
    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    TEXTAREA = "textarea"
    DATE = "date"


# Kinds whose answer is picked from FieldSchema.options
CHOICE_KINDS = frozenset({FieldKind.SELECT, FieldKind.RADIO, FieldKind.CHECKBOX})


class FieldBounds(BaseModel):
    """Inclusive numeric range. Only evaluated for number fields."""
    min: Optional[float] = None
    max: Optional[float] = None

    @model_validator(mode="after")
    def check_order(self) -> "FieldBounds":
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"bounds.min ({self.min}) is greater than bounds.max ({self.max})")
        return self


class FieldSchema(BaseModel):
    """
    One question within an assessment.

    options is non-empty exactly when kind is select, radio or checkbox.
    pattern is reserved metadata: stored, never evaluated.
    """
    id: str = Field(..., min_length=1, description="Answer key, unique within the schema")
    label: str = Field(default="", description="Display text")
    kind: FieldKind = Field(default=FieldKind.TEXT)
    required: bool = False
    options: List[str] = Field(default_factory=list)
    bounds: Optional[FieldBounds] = None
    pattern: Optional[str] = None

    @model_validator(mode="after")
    def check_options(self) -> "FieldSchema":
        if self.kind in CHOICE_KINDS and not self.options:
            raise ValueError(f"field '{self.id}' of kind {self.kind.value} requires options")
        if self.kind not in CHOICE_KINDS and self.options:
            raise ValueError(f"field '{self.id}' of kind {self.kind.value} cannot have options")
        return self


def _check_unique_field_ids(fields: List[FieldSchema]) -> List[FieldSchema]:
    seen = set()
    for f in fields:
        if f.id in seen:
            raise ValueError(f"duplicate field id '{f.id}'")
        seen.add(f.id)
    return fields


class AssessmentSchema(BaseModel):
    """A questionnaire template. Field order is display and response order."""
    id: str
    title: str
    description: str = ""
    category: str = ""
    fields: List[FieldSchema] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_validator("fields")
    @classmethod
    def unique_field_ids(cls, v: List[FieldSchema]) -> List[FieldSchema]:
        return _check_unique_field_ids(v)

    @property
    def field_ids(self) -> List[str]:
        return [f.id for f in self.fields]

    def get_field(self, field_id: str) -> Optional[FieldSchema]:
        for f in self.fields:
            if f.id == field_id:
                return f
        return None


class Response(BaseModel):
    """
    A respondent's submitted answers.

    answers maps FieldSchema.id to a string, number or list of strings.
    Immutable after submission except for score backfill.
    """
    id: str
    assessment_schema_id: str
    respondent_id: str
    answers: Dict[str, Any] = Field(default_factory=dict)
    completed_at: datetime
    score: Optional[int] = Field(default=None, ge=0, le=100)


# =============================================
# Input Models
# =============================================

class AssessmentSchemaDraft(BaseModel):
    """Operator input for a new schema. id and timestamps are assigned on create."""
    model_config = ConfigDict(extra="forbid")

    title: str = ""
    description: str = ""
    category: str = ""
    fields: List[FieldSchema] = Field(default_factory=list)


class AssessmentSchemaUpdate(BaseModel):
    """Partial update. Only attributes explicitly set are applied."""
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    fields: Optional[List[FieldSchema]] = None


class FieldUpdate(BaseModel):
    """Partial update of a single field. The field id cannot change."""
    model_config = ConfigDict(extra="forbid")

    label: Optional[str] = None
    kind: Optional[FieldKind] = None
    required: Optional[bool] = None
    options: Optional[List[str]] = None
    bounds: Optional[FieldBounds] = None
    pattern: Optional[str] = None


class ResponseDraft(BaseModel):
    """Response payload before the repository assigns id and completed_at."""
    assessment_schema_id: str
    respondent_id: str
    answers: Dict[str, Any] = Field(default_factory=dict)
    score: Optional[int] = Field(default=None, ge=0, le=100)
