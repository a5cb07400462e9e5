"""
Validation Models

Outcome types for single-field and whole-submission validation.

Version: validation_v1
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from assessment_engine.errors import ErrorKind


class ValidationOutcome(BaseModel):
    """Ok, or Rejected with a reason."""
    ok: bool
    reason: Optional[ErrorKind] = None
    message: Optional[str] = None

    @classmethod
    def accepted(cls) -> "ValidationOutcome":
        return cls(ok=True)

    @classmethod
    def rejected(cls, reason: ErrorKind, message: str) -> "ValidationOutcome":
        return cls(ok=False, reason=reason, message=message)


class FieldError(BaseModel):
    field_id: str
    reason: ErrorKind
    message: str


class SubmissionValidation(BaseModel):
    """Result of validating every field of a schema. Errors follow schema field order."""
    schema_id: str
    errors: List[FieldError] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def as_map(self) -> Dict[str, ErrorKind]:
        return {e.field_id: e.reason for e in self.errors}
