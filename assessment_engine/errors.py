"""
Assessment Engine Error Kinds

Field-level kinds (ErrorKind) are recoverable and surfaced to the respondent.
Everything else is raised as an AssessmentEngineError subclass carrying a
machine-readable code and the HTTP status the API layer maps it to.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """Reason a single field value was rejected."""
    MISSING_REQUIRED = "MissingRequired"
    NOT_A_NUMBER = "NotANumber"
    BELOW_MIN = "BelowMin"
    ABOVE_MAX = "AboveMax"


class EngineErrorCode(str, Enum):
    SCHEMA_NOT_FOUND = "SCHEMA_NOT_FOUND"
    RESPONSE_NOT_FOUND = "RESPONSE_NOT_FOUND"
    FIELD_NOT_FOUND = "FIELD_NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    INVALID_SCHEMA = "INVALID_SCHEMA"
    SUBMISSION_REJECTED = "SUBMISSION_REJECTED"
    RESPONSE_IMMUTABLE = "RESPONSE_IMMUTABLE"
    DUPLICATE_IDENTIFIER = "DUPLICATE_IDENTIFIER"


class AssessmentEngineError(Exception):
    """Base exception for engine failures."""

    def __init__(self, error_code: EngineErrorCode, message: str, http_code: int = 400):
        self.error_code = error_code
        self.message = message
        self.http_code = http_code
        super().__init__(f"{error_code.value}: {message}")

    def to_detail(self) -> Dict[str, Any]:
        return {"error": self.error_code.value, "message": self.message}


class SchemaNotFound(AssessmentEngineError):
    def __init__(self, schema_id: str):
        super().__init__(
            EngineErrorCode.SCHEMA_NOT_FOUND,
            f"Assessment schema '{schema_id}' not found",
            http_code=404,
        )
        self.schema_id = schema_id


class ResponseNotFound(AssessmentEngineError):
    def __init__(self, response_id: str):
        super().__init__(
            EngineErrorCode.RESPONSE_NOT_FOUND,
            f"Response '{response_id}' not found",
            http_code=404,
        )
        self.response_id = response_id


class FieldNotFound(AssessmentEngineError):
    def __init__(self, schema_id: str, field_id: str):
        super().__init__(
            EngineErrorCode.FIELD_NOT_FOUND,
            f"Field '{field_id}' not found in assessment schema '{schema_id}'",
            http_code=404,
        )
        self.schema_id = schema_id
        self.field_id = field_id


class Forbidden(AssessmentEngineError):
    """Role-gated operation attempted by a caller without the admin role."""

    def __init__(self, operation: str, actor_id: Optional[str] = None):
        super().__init__(
            EngineErrorCode.FORBIDDEN,
            f"Operation '{operation}' requires the admin role",
            http_code=403,
        )
        self.operation = operation
        self.actor_id = actor_id


class InvalidSchema(AssessmentEngineError):
    """Operator-supplied schema definition is unusable."""

    def __init__(self, message: str):
        super().__init__(EngineErrorCode.INVALID_SCHEMA, message, http_code=422)


class SubmissionRejected(AssessmentEngineError):
    """
    One or more fields failed validation at submit time.

    Carries the complete set of per-field failures, not just the first.
    """

    def __init__(self, schema_id: str, field_errors: List[Any]):
        self.schema_id = schema_id
        self.field_errors = list(field_errors)
        super().__init__(
            EngineErrorCode.SUBMISSION_REJECTED,
            f"{len(self.field_errors)} field(s) failed validation",
            http_code=422,
        )

    @property
    def errors(self) -> Dict[str, ErrorKind]:
        return {e.field_id: e.reason for e in self.field_errors}

    def to_detail(self) -> Dict[str, Any]:
        detail = super().to_detail()
        detail["field_errors"] = [e.model_dump(mode="json") for e in self.field_errors]
        return detail


class ResponseImmutable(AssessmentEngineError):
    def __init__(self, response_id: str):
        super().__init__(
            EngineErrorCode.RESPONSE_IMMUTABLE,
            f"Response '{response_id}' already has a score",
            http_code=409,
        )
        self.response_id = response_id


class DuplicateIdentifier(AssessmentEngineError):
    """
    Identifier generator produced an id that already exists.

    Fatal: indicates a generator bug and must not be retried.
    """

    def __init__(self, identifier: str, collection: str):
        super().__init__(
            EngineErrorCode.DUPLICATE_IDENTIFIER,
            f"Identifier '{identifier}' already exists in {collection}",
            http_code=500,
        )
        self.identifier = identifier
        self.collection = collection
