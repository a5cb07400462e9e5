"""
Submission Pipeline

    load schema -> validate every field -> score -> persist

All-or-nothing: if any field fails, SubmissionRejected carries every
failure and nothing is stored. Keys that do not belong to the schema are
dropped before storing.

Results are assembled on every view: the stored response, its schema,
display values per field and freshly derived insights.
"""

import logging
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, Field

from assessment_engine.errors import SubmissionRejected
from assessment_engine.identity import Actor
from assessment_engine.insights import Insight, InsightRegistry, derive_insights
from assessment_engine.repository import AssessmentRepository
from assessment_engine.schema.models import AssessmentSchema, Response, ResponseDraft
from assessment_engine.schema.rendering import display_value
from assessment_engine.scoring import completion_score
from assessment_engine.validation import validate_answers

logger = logging.getLogger(__name__)


class AnswerDisplay(BaseModel):
    field_id: str
    label: str
    value: Any = None
    display: str


class AssessmentResults(BaseModel):
    response: Response
    assessment_schema: AssessmentSchema
    answers: List[AnswerDisplay] = Field(default_factory=list)
    insights: List[Insight] = Field(default_factory=list)


def submit_assessment(
    repository: AssessmentRepository,
    actor: Actor,
    schema_id: str,
    answers: Optional[Mapping[str, Any]],
) -> Response:
    """Validate, score and store one response for actor."""
    answers = dict(answers or {})
    schema = repository.get_schema(schema_id)

    validation = validate_answers(schema, answers)
    if not validation.is_valid:
        logger.info(f"Submission to {schema_id} by {actor.id} rejected: "
                    f"{[e.field_id for e in validation.errors]}")
        raise SubmissionRejected(schema_id, validation.errors)

    field_ids = set(schema.field_ids)
    kept = {k: v for k, v in answers.items() if k in field_ids}
    score = completion_score(schema, kept)

    return repository.submit_response(ResponseDraft(
        assessment_schema_id=schema.id,
        respondent_id=actor.id,
        answers=kept,
        score=score,
    ))


def build_results(
    repository: AssessmentRepository,
    response_id: str,
    registry: Optional[InsightRegistry] = None,
) -> AssessmentResults:
    response = repository.get_response(response_id)
    schema = repository.get_schema(response.assessment_schema_id)

    rows = [
        AnswerDisplay(
            field_id=f.id,
            label=f.label,
            value=response.answers.get(f.id),
            display=display_value(f, response.answers.get(f.id)),
        )
        for f in schema.fields
    ]
    # Answers to fields removed after submission are still shown
    for key, value in response.answers.items():
        if schema.get_field(key) is None:
            rows.append(AnswerDisplay(field_id=key, label=key, value=value, display=display_value(None, value)))

    return AssessmentResults(
        response=response,
        assessment_schema=schema,
        answers=rows,
        insights=derive_insights(schema, response, registry),
    )
