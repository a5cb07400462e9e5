"""
Completion Scoring

score = round(100 * answered_fields / total_fields), half-up.

This is a completion-rate proxy, not a correctness score: schemas carry no
notion of a correct answer. Computed once at submission and stored.

Version: scoring_v1
"""

from typing import Any, Mapping, Optional

from assessment_engine.schema.answers import is_blank
from assessment_engine.schema.models import AssessmentSchema


def count_answered(schema: AssessmentSchema, answers: Optional[Mapping[str, Any]]) -> int:
    """Number of schema fields with a present, non-blank answer."""
    answers = answers or {}
    return sum(1 for f in schema.fields if not is_blank(answers.get(f.id)))


def round_half_up(numerator: int, denominator: int) -> int:
    """round(numerator / denominator) with halves rounded up, in exact integer arithmetic."""
    return (2 * numerator + denominator) // (2 * denominator)


def completion_score(schema: AssessmentSchema, answers: Optional[Mapping[str, Any]]) -> int:
    """Percentage of fields answered, 0..100. An empty schema scores 0."""
    total = len(schema.fields)
    if total == 0:
        return 0
    return round_half_up(100 * count_answered(schema, answers), total)
