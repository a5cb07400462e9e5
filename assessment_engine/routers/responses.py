"""
Response Endpoints

Endpoints:
- POST /api/v1/assessments/{schema_id}/validate-field - Check one value as the respondent types
- POST /api/v1/assessments/{schema_id}/responses - Submit answers (all-or-nothing)
- GET /api/v1/responses/me - Responses of the current actor
- GET /api/v1/responses/{response_id} - Stored response
- GET /api/v1/responses/{response_id}/results - Response, display values and insights
- GET /api/v1/dashboard - Completion overview for the current actor

Respondents see their own responses; admins see all.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from assessment_engine.dependencies import get_current_actor, get_insight_registry, get_repository
from assessment_engine.errors import FieldNotFound, Forbidden
from assessment_engine.identity import Actor
from assessment_engine.insights import InsightRegistry
from assessment_engine.repository import AssessmentRepository
from assessment_engine.schema.models import Response
from assessment_engine.scoring import RespondentDashboard, respondent_dashboard
from assessment_engine.submission import AssessmentResults, build_results, submit_assessment
from assessment_engine.validation import ValidationOutcome, validate_field

router = APIRouter(
    prefix="/api/v1",
    tags=["responses"],
)


class ValidateFieldRequest(BaseModel):
    field_id: str
    value: Any = None


class SubmitRequest(BaseModel):
    answers: Dict[str, Any] = Field(default_factory=dict)


class SubmitResponse(BaseModel):
    status: str = "success"
    response_id: str
    score: int
    next_step: str = "results"


def _check_owner(actor: Actor, response: Response) -> None:
    if not actor.is_admin and response.respondent_id != actor.id:
        raise Forbidden("view_response", actor_id=actor.id)


@router.post("/assessments/{schema_id}/validate-field", response_model=ValidationOutcome)
def validate_single_field(
    schema_id: str,
    request: ValidateFieldRequest,
    actor: Actor = Depends(get_current_actor),
    repository: AssessmentRepository = Depends(get_repository),
):
    schema = repository.get_schema(schema_id)
    field = schema.get_field(request.field_id)
    if field is None:
        raise FieldNotFound(schema_id, request.field_id)
    return validate_field(field, request.value)


@router.post("/assessments/{schema_id}/responses", response_model=SubmitResponse, status_code=201)
def submit(
    schema_id: str,
    request: SubmitRequest,
    actor: Actor = Depends(get_current_actor),
    repository: AssessmentRepository = Depends(get_repository),
):
    response = submit_assessment(repository, actor, schema_id, request.answers)
    return SubmitResponse(response_id=response.id, score=response.score)


@router.get("/responses/me", response_model=List[Response])
def my_responses(
    actor: Actor = Depends(get_current_actor),
    repository: AssessmentRepository = Depends(get_repository),
):
    return repository.responses_for_respondent(actor.id)


@router.get("/responses/{response_id}", response_model=Response)
def get_response(
    response_id: str,
    actor: Actor = Depends(get_current_actor),
    repository: AssessmentRepository = Depends(get_repository),
):
    response = repository.get_response(response_id)
    _check_owner(actor, response)
    return response


@router.get("/responses/{response_id}/results", response_model=AssessmentResults)
def get_results(
    response_id: str,
    actor: Actor = Depends(get_current_actor),
    repository: AssessmentRepository = Depends(get_repository),
    registry: InsightRegistry = Depends(get_insight_registry),
):
    _check_owner(actor, repository.get_response(response_id))
    return build_results(repository, response_id, registry)


@router.get("/dashboard", response_model=RespondentDashboard)
def dashboard(
    actor: Actor = Depends(get_current_actor),
    repository: AssessmentRepository = Depends(get_repository),
):
    return respondent_dashboard(repository, actor.id)
