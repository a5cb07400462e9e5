"""
Assessment Engine Health Check
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from assessment_engine import config
from assessment_engine.dependencies import get_insight_registry, get_repository
from assessment_engine.insights import InsightRegistry
from assessment_engine.repository import AssessmentRepository

router = APIRouter(prefix="/api/v1/health", tags=["Health"])


class HealthCheckResponse(BaseModel):
    status: str
    timestamp: str
    api_version: str
    store: str
    schemas: int
    responses: int
    insight_rules: list


@router.get("", response_model=HealthCheckResponse)
def health(
    repository: AssessmentRepository = Depends(get_repository),
    registry: InsightRegistry = Depends(get_insight_registry),
):
    return HealthCheckResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        api_version=config.API_VERSION,
        store=config.ASSESSMENT_STORE,
        schemas=repository.schema_count(),
        responses=repository.response_count(),
        insight_rules=[rule.name for rule in registry.rules],
    )
