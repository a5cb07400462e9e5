"""
Insight Models

Version: insights_v1
"""

from enum import Enum
from typing import NamedTuple, Optional

from pydantic import BaseModel, Field


class Severity(str, Enum):
    SUCCESS = "success"
    GOOD = "good"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"


class Insight(BaseModel):
    """A human-readable finding derived from a response. Never persisted."""
    severity: Severity
    title: str
    description: str
    source: Optional[str] = Field(
        default=None,
        description="Name of the rule that produced this insight",
    )


class BloodPressureCategory(NamedTuple):
    severity: Severity
    label: str
    description: str
