"""
Response Statistics

Aggregates over stored responses for the assessment listing and the
respondent dashboard. Read-only.
"""

from typing import List

from pydantic import BaseModel, Field

from assessment_engine.repository import AssessmentRepository
from assessment_engine.schema.models import Response

from .score import round_half_up

RECENT_LIMIT = 5


class SchemaStats(BaseModel):
    schema_id: str
    total_responses: int = 0
    average_score: int = 0


class RespondentDashboard(BaseModel):
    respondent_id: str
    total_assessments: int = Field(description="Assessment schemas available")
    completed: int = Field(description="Responses submitted by the respondent")
    pending: int
    success_rate: int = Field(description="completed / total_assessments as a percentage")
    recent: List[Response] = Field(default_factory=list)


def schema_stats(repository: AssessmentRepository, schema_id: str) -> SchemaStats:
    """Response count and rounded mean score. Responses without a score count as 0."""
    repository.get_schema(schema_id)
    responses = repository.list_responses(schema_id)
    if not responses:
        return SchemaStats(schema_id=schema_id)
    total = sum(r.score or 0 for r in responses)
    return SchemaStats(
        schema_id=schema_id,
        total_responses=len(responses),
        average_score=round_half_up(total, len(responses)),
    )


def respondent_dashboard(repository: AssessmentRepository, respondent_id: str) -> RespondentDashboard:
    total = repository.schema_count()
    mine = repository.responses_for_respondent(respondent_id)
    completed = len(mine)
    # Newest first; submission order breaks timestamp ties
    ordered = sorted(enumerate(mine), key=lambda pair: (pair[1].completed_at, pair[0]), reverse=True)
    recent = [r for _, r in ordered[:RECENT_LIMIT]]
    return RespondentDashboard(
        respondent_id=respondent_id,
        total_assessments=total,
        completed=completed,
        pending=max(total - completed, 0),
        success_rate=min(round_half_up(100 * completed, total), 100) if total else 0,
        recent=recent,
    )
