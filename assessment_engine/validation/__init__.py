"""
Validation Layer

Generic field validation: required-ness and numeric bounds only.

Version: validation_v1
"""

from .models import FieldError, SubmissionValidation, ValidationOutcome
from .validate import clear_field_error, error_message, validate_answers, validate_field

__all__ = [
    # Models
    "FieldError",
    "SubmissionValidation",
    "ValidationOutcome",
    # Functions
    "validate_field",
    "validate_answers",
    "clear_field_error",
    "error_message",
]

__version__ = "validation_v1"
