"""
Assessment Schema Endpoints

Endpoints:
- GET /api/v1/assessments - List schemas (search, category filters)
- GET /api/v1/assessments/categories - Distinct categories
- GET /api/v1/assessments/{schema_id} - Schema with widget hints
- GET /api/v1/assessments/{schema_id}/stats - Response count and average score
- POST /api/v1/assessments - Create schema (admin)
- PATCH /api/v1/assessments/{schema_id} - Update schema (admin)
- DELETE /api/v1/assessments/{schema_id} - Delete schema and its responses (admin)
- POST /api/v1/assessments/{schema_id}/fields - Add field (admin)
- PATCH /api/v1/assessments/{schema_id}/fields/{field_id} - Update field (admin)
- DELETE /api/v1/assessments/{schema_id}/fields/{field_id} - Remove field (admin)

Security: every endpoint needs a session; mutations need the admin role,
which the repository enforces.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from assessment_engine.dependencies import get_current_actor, get_repository
from assessment_engine.identity import Actor
from assessment_engine.repository import AssessmentRepository
from assessment_engine.schema import (
    AssessmentSchema,
    AssessmentSchemaDraft,
    AssessmentSchemaUpdate,
    FieldSchema,
    FieldUpdate,
    range_hint,
    widget_for,
)
from assessment_engine.scoring import SchemaStats, schema_stats

router = APIRouter(
    prefix="/api/v1/assessments",
    tags=["assessments"],
)


class FieldView(BaseModel):
    field: FieldSchema
    widget: str
    hint: Optional[str] = None


class SchemaDetailResponse(BaseModel):
    assessment_schema: AssessmentSchema
    fields: List[FieldView] = Field(default_factory=list)


class SchemaListResponse(BaseModel):
    count: int
    assessments: List[AssessmentSchema]


class AddFieldRequest(BaseModel):
    field: FieldSchema
    position: Optional[int] = Field(default=None, ge=0, description="Insert index; default appends")


class DeleteSchemaResponse(BaseModel):
    status: str = "deleted"
    schema_id: str
    responses_deleted: int


def _detail(schema: AssessmentSchema) -> SchemaDetailResponse:
    return SchemaDetailResponse(
        assessment_schema=schema,
        fields=[FieldView(field=f, widget=widget_for(f.kind), hint=range_hint(f)) for f in schema.fields],
    )


@router.get("", response_model=SchemaListResponse)
def list_assessments(
    search: Optional[str] = Query(default=None),
    category: Optional[str] = Query(default=None, description="Exact category; 'all' disables the filter"),
    actor: Actor = Depends(get_current_actor),
    repository: AssessmentRepository = Depends(get_repository),
):
    if category == "all":
        category = None
    schemas = repository.list_schemas(search=search, category=category)
    return SchemaListResponse(count=len(schemas), assessments=schemas)


@router.get("/categories")
def list_categories(
    actor: Actor = Depends(get_current_actor),
    repository: AssessmentRepository = Depends(get_repository),
):
    return {"categories": repository.list_categories()}


@router.get("/{schema_id}", response_model=SchemaDetailResponse)
def get_assessment(
    schema_id: str,
    actor: Actor = Depends(get_current_actor),
    repository: AssessmentRepository = Depends(get_repository),
):
    return _detail(repository.get_schema(schema_id))


@router.get("/{schema_id}/stats", response_model=SchemaStats)
def get_assessment_stats(
    schema_id: str,
    actor: Actor = Depends(get_current_actor),
    repository: AssessmentRepository = Depends(get_repository),
):
    return schema_stats(repository, schema_id)


@router.post("", response_model=SchemaDetailResponse, status_code=201)
def create_assessment(
    request: AssessmentSchemaDraft,
    actor: Actor = Depends(get_current_actor),
    repository: AssessmentRepository = Depends(get_repository),
):
    return _detail(repository.create_schema(actor, request))


@router.patch("/{schema_id}", response_model=SchemaDetailResponse)
def update_assessment(
    schema_id: str,
    request: AssessmentSchemaUpdate,
    actor: Actor = Depends(get_current_actor),
    repository: AssessmentRepository = Depends(get_repository),
):
    return _detail(repository.update_schema(actor, schema_id, request))


@router.delete("/{schema_id}", response_model=DeleteSchemaResponse)
def delete_assessment(
    schema_id: str,
    actor: Actor = Depends(get_current_actor),
    repository: AssessmentRepository = Depends(get_repository),
):
    removed = repository.delete_schema(actor, schema_id)
    return DeleteSchemaResponse(schema_id=schema_id, responses_deleted=removed)


@router.post("/{schema_id}/fields", response_model=SchemaDetailResponse, status_code=201)
def add_field(
    schema_id: str,
    request: AddFieldRequest,
    actor: Actor = Depends(get_current_actor),
    repository: AssessmentRepository = Depends(get_repository),
):
    return _detail(repository.add_field(actor, schema_id, request.field, position=request.position))


@router.patch("/{schema_id}/fields/{field_id}", response_model=SchemaDetailResponse)
def update_field(
    schema_id: str,
    field_id: str,
    request: FieldUpdate,
    actor: Actor = Depends(get_current_actor),
    repository: AssessmentRepository = Depends(get_repository),
):
    return _detail(repository.update_field(actor, schema_id, field_id, request))


@router.delete("/{schema_id}/fields/{field_id}", response_model=SchemaDetailResponse)
def remove_field(
    schema_id: str,
    field_id: str,
    actor: Actor = Depends(get_current_actor),
    repository: AssessmentRepository = Depends(get_repository),
):
    return _detail(repository.remove_field(actor, schema_id, field_id))
