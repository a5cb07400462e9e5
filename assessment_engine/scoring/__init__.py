"""
Scoring Module

Completion scoring and response statistics.

Version: scoring_v1
"""

from .score import completion_score, count_answered, round_half_up
from .stats import RespondentDashboard, SchemaStats, respondent_dashboard, schema_stats

__all__ = [
    "completion_score",
    "count_answered",
    "round_half_up",
    "SchemaStats",
    "RespondentDashboard",
    "schema_stats",
    "respondent_dashboard",
]

__version__ = "scoring_v1"
