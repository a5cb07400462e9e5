"""
Insight Generation Module

Derives interpretive findings from a response and its schema.

Design Principles:
- PURE: no side effects, nothing persisted
- GRACEFUL: malformed answers mean an absent insight, never an exception
- PLUGGABLE: template-specific rules live in an InsightRegistry

Version: insights_v1
"""

from .models import BloodPressureCategory, Insight, Severity
from .rules import (
    blood_pressure_insight,
    bmi_insight,
    calculate_bmi,
    categorize_blood_pressure,
    categorize_bmi,
    completion_insight,
)
from .registry import InsightRegistry, InsightRule, default_registry, schema_is
from .derive import derive_insights, get_default_registry

__all__ = [
    # Models
    "Insight",
    "Severity",
    "BloodPressureCategory",
    # Rules
    "completion_insight",
    "calculate_bmi",
    "categorize_bmi",
    "bmi_insight",
    "categorize_blood_pressure",
    "blood_pressure_insight",
    # Registry
    "InsightRegistry",
    "InsightRule",
    "default_registry",
    "schema_is",
    # Functions
    "derive_insights",
    "get_default_registry",
]

__version__ = "insights_v1"
