"""
Assessment Repository

Sole owner of the AssessmentSchema and Response collections.

Guarantees:
- Identifiers are unique for the lifetime of the store; a collision is fatal
- Deleting a schema deletes exactly the responses that reference it
- created_at never changes; updated_at strictly advances on every mutation
- Schema mutations require the admin role, even when called directly
- Callers only ever receive copies; stored objects are never aliased
- Every mutation ends with an explicit save to the persistence backend; a
  failed save leaves the in-memory collections untouched
- Every stored field has a non-blank label
- Mutations are serialized (one in flight per repository)

Submitted responses are NOT validated here; validation happens before
submit_response is called.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from threading import RLock
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from assessment_engine import config
from assessment_engine.errors import (
    DuplicateIdentifier,
    FieldNotFound,
    InvalidSchema,
    ResponseImmutable,
    ResponseNotFound,
    SchemaNotFound,
)
from assessment_engine.identity import Actor, require_admin
from assessment_engine.schema.models import (
    CHOICE_KINDS,
    AssessmentSchema,
    AssessmentSchemaDraft,
    AssessmentSchemaUpdate,
    FieldSchema,
    FieldUpdate,
    Response,
    ResponseDraft,
)
from assessment_engine.schema.templates import builtin_templates

from .backends import PersistenceBackend, InMemoryBackend, build_backend

logger = logging.getLogger(__name__)

IdGenerator = Callable[[str], str]

SCHEMA_ID_PREFIX = "as"
RESPONSE_ID_PREFIX = "resp"


class TokenIdGenerator:
    """prefix_<random hex>. Collision-resistant, independent of the clock."""

    def __init__(self, nbytes: int = 8):
        self.nbytes = nbytes

    def __call__(self, prefix: str) -> str:
        return f"{prefix}_{secrets.token_hex(self.nbytes)}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _advance(previous: datetime) -> datetime:
    now = utcnow()
    if now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def _coerce(model_cls, value):
    if isinstance(value, model_cls):
        return value
    try:
        return model_cls.model_validate(value)
    except ValidationError as e:
        raise InvalidSchema(str(e)) from e


def _labelled(fields) -> List[FieldSchema]:
    """Drop fields whose label is blank."""
    return [f.model_copy(deep=True) for f in fields if f.label.strip()]


def _require_label(label: Optional[str]) -> None:
    if label is None or not label.strip():
        raise InvalidSchema("field label is required")


def _require_text(value: Optional[str], name: str) -> str:
    if value is None or not value.strip():
        raise InvalidSchema(f"{name} is required")
    return value.strip()


class AssessmentRepository:

    def __init__(self, backend: Optional[PersistenceBackend] = None,
                 id_generator: Optional[IdGenerator] = None):
        self._backend = backend if backend is not None else InMemoryBackend()
        self._new_id = id_generator or TokenIdGenerator()
        self._lock = RLock()
        self._schemas: Dict[str, AssessmentSchema] = {}
        self._responses: Dict[str, Response] = {}
        self.load()

    # ============================================================
    # PERSISTENCE
    # ============================================================

    def load(self) -> None:
        """Replace in-memory state with the backend's collections."""
        with self._lock:
            raw_schemas, raw_responses = self._backend.load()
            schemas: Dict[str, AssessmentSchema] = {}
            for raw in raw_schemas:
                schema = AssessmentSchema.model_validate(raw)
                if schema.id in schemas:
                    raise DuplicateIdentifier(schema.id, "assessment_schemas")
                schemas[schema.id] = schema
            responses: Dict[str, Response] = {}
            for raw in raw_responses:
                response = Response.model_validate(raw)
                if response.id in responses:
                    raise DuplicateIdentifier(response.id, "responses")
                responses[response.id] = response
            self._schemas = schemas
            self._responses = responses
        logger.info(f"Repository loaded {len(schemas)} schemas, {len(responses)} responses "
                    f"from {self._backend.name} backend")

    def save(self) -> None:
        with self._lock:
            self._write(self._schemas, self._responses)

    def _write(self, schemas: Dict[str, AssessmentSchema], responses: Dict[str, Response]) -> None:
        self._backend.save(
            [s.model_dump(mode="json") for s in schemas.values()],
            [r.model_dump(mode="json") for r in responses.values()],
        )

    def _commit(self, schemas: Dict[str, AssessmentSchema], responses: Dict[str, Response]) -> None:
        """
        Persist the next state of both collections, then make it current.

        Mutations build new dicts and hand them here. If the backend raises,
        the in-memory collections are left exactly as they were.
        """
        try:
            self._write(schemas, responses)
        except Exception as e:
            logger.error(f"Save to {self._backend.name} backend failed, mutation discarded: {e}")
            raise
        self._schemas = schemas
        self._responses = responses

    def seed_templates(self, templates: Optional[List[AssessmentSchema]] = None) -> int:
        """Install built-in templates when the store has no schemas. Returns the number installed."""
        with self._lock:
            if self._schemas:
                return 0
            schemas: Dict[str, AssessmentSchema] = {}
            for template in templates if templates is not None else builtin_templates():
                if template.id in schemas:
                    raise DuplicateIdentifier(template.id, "assessment_schemas")
                schemas[template.id] = template.model_copy(deep=True)
            installed = len(schemas)
            self._commit(schemas, self._responses)
        logger.info(f"Seeded {installed} built-in assessment templates")
        return installed

    # ============================================================
    # INTERNALS
    # ============================================================

    def _assign_id(self, prefix: str, existing: Mapping[str, Any], collection: str) -> str:
        new_id = self._new_id(prefix)
        if new_id in existing:
            logger.error(f"Identifier collision: {new_id} in {collection}")
            raise DuplicateIdentifier(new_id, collection)
        return new_id

    def _stored_schema(self, schema_id: str) -> AssessmentSchema:
        schema = self._schemas.get(schema_id)
        if schema is None:
            raise SchemaNotFound(schema_id)
        return schema

    def _stored_response(self, response_id: str) -> Response:
        response = self._responses.get(response_id)
        if response is None:
            raise ResponseNotFound(response_id)
        return response

    def _rebuild_schema(self, current: AssessmentSchema, changes: Dict[str, Any]) -> AssessmentSchema:
        data = current.model_dump()
        data.update(changes)
        data["id"] = current.id
        data["created_at"] = current.created_at
        data["updated_at"] = _advance(current.updated_at)
        if not data["fields"]:
            raise InvalidSchema("An assessment must have at least one field")
        try:
            return AssessmentSchema.model_validate(data)
        except ValidationError as e:
            raise InvalidSchema(str(e)) from e

    def _commit_schema(self, schema: AssessmentSchema, action: str) -> AssessmentSchema:
        schemas = dict(self._schemas)
        schemas[schema.id] = schema
        self._commit(schemas, self._responses)
        logger.info(f"Assessment schema {schema.id} {action}")
        return schema.model_copy(deep=True)

    # ============================================================
    # SCHEMA MUTATIONS (admin only)
    # ============================================================

    def create_schema(self, actor: Actor, draft: Union[AssessmentSchemaDraft, Mapping[str, Any]]) -> AssessmentSchema:
        """
        Store a new schema. Title, description, category and at least one
        labelled field are required; fields with a blank label are dropped.
        """
        require_admin(actor, "create_schema")
        draft = _coerce(AssessmentSchemaDraft, draft)

        title = _require_text(draft.title, "title")
        description = _require_text(draft.description, "description")
        category = _require_text(draft.category, "category")
        fields = _labelled(draft.fields)
        if not fields:
            raise InvalidSchema("An assessment must have at least one field")

        with self._lock:
            schema_id = self._assign_id(SCHEMA_ID_PREFIX, self._schemas, "assessment_schemas")
            now = utcnow()
            try:
                schema = AssessmentSchema(
                    id=schema_id,
                    title=title,
                    description=description,
                    category=category,
                    fields=fields,
                    created_at=now,
                    updated_at=now,
                )
            except ValidationError as e:
                raise InvalidSchema(str(e)) from e
            return self._commit_schema(schema, f"created by actor {actor.id}")

    def update_schema(self, actor: Actor, schema_id: str,
                      update: Union[AssessmentSchemaUpdate, Mapping[str, Any]]) -> AssessmentSchema:
        """
        Apply the attributes explicitly set in update. Always refreshes updated_at.

        A replacement field list follows the create rule: fields with a blank
        label are dropped and at least one must remain.
        """
        require_admin(actor, "update_schema")
        update = _coerce(AssessmentSchemaUpdate, update)

        changes: Dict[str, Any] = {}
        for name in ("title", "description", "category"):
            if name in update.model_fields_set:
                changes[name] = _require_text(getattr(update, name), name)
        if "fields" in update.model_fields_set:
            if update.fields is None:
                raise InvalidSchema("fields cannot be null")
            changes["fields"] = [f.model_dump() for f in _labelled(update.fields)]

        with self._lock:
            schema = self._rebuild_schema(self._stored_schema(schema_id), changes)
            return self._commit_schema(schema, f"updated by actor {actor.id} ({sorted(changes)})")

    def add_field(self, actor: Actor, schema_id: str, field: Union[FieldSchema, Mapping[str, Any]],
                  position: Optional[int] = None) -> AssessmentSchema:
        """Insert a field at position (default: end). The field must have a non-blank label."""
        require_admin(actor, "add_field")
        field = _coerce(FieldSchema, field)
        _require_label(field.label)

        with self._lock:
            current = self._stored_schema(schema_id)
            if current.get_field(field.id) is not None:
                raise InvalidSchema(f"duplicate field id '{field.id}'")
            fields = [f.model_dump() for f in current.fields]
            index = len(fields) if position is None else max(0, min(position, len(fields)))
            fields.insert(index, field.model_dump())
            schema = self._rebuild_schema(current, {"fields": fields})
            return self._commit_schema(schema, f"gained field {field.id}")

    def update_field(self, actor: Actor, schema_id: str, field_id: str,
                     update: Union[FieldUpdate, Mapping[str, Any]]) -> AssessmentSchema:
        """Merge changes into one field, keeping its position. A blank label is rejected."""
        require_admin(actor, "update_field")
        update = _coerce(FieldUpdate, update)
        if "label" in update.model_fields_set:
            _require_label(update.label)
        changes = {name: getattr(update, name) for name in update.model_fields_set}

        with self._lock:
            current = self._stored_schema(schema_id)
            if current.get_field(field_id) is None:
                raise FieldNotFound(schema_id, field_id)
            fields = []
            for f in current.fields:
                data = f.model_dump()
                if f.id == field_id:
                    data.update({k: (v.model_dump() if hasattr(v, "model_dump") else v)
                                 for k, v in changes.items()})
                    if data["options"] is None:
                        data["options"] = []
                    # Switching to a free-form kind drops the stale option list
                    if "options" not in changes and data["kind"] not in CHOICE_KINDS:
                        data["options"] = []
                fields.append(data)
            schema = self._rebuild_schema(current, {"fields": fields})
            return self._commit_schema(schema, f"field {field_id} updated")

    def remove_field(self, actor: Actor, schema_id: str, field_id: str) -> AssessmentSchema:
        require_admin(actor, "remove_field")
        with self._lock:
            current = self._stored_schema(schema_id)
            if current.get_field(field_id) is None:
                raise FieldNotFound(schema_id, field_id)
            fields = [f.model_dump() for f in current.fields if f.id != field_id]
            schema = self._rebuild_schema(current, {"fields": fields})
            return self._commit_schema(schema, f"lost field {field_id}")

    def delete_schema(self, actor: Actor, schema_id: str) -> int:
        """Delete a schema and every response referencing it. Returns the number of responses removed."""
        require_admin(actor, "delete_schema")
        with self._lock:
            self._stored_schema(schema_id)
            schemas = {sid: s for sid, s in self._schemas.items() if sid != schema_id}
            responses = {rid: r for rid, r in self._responses.items() if r.assessment_schema_id != schema_id}
            orphaned = len(self._responses) - len(responses)
            self._commit(schemas, responses)
        logger.info(f"Assessment schema {schema_id} deleted by actor {actor.id}, "
                    f"cascaded {orphaned} responses")
        return orphaned

    # ============================================================
    # RESPONSE MUTATIONS
    # ============================================================

    def submit_response(self, draft: Union[ResponseDraft, Mapping[str, Any]]) -> Response:
        """Append a response. Assigns id and completed_at. Does not validate answers."""
        if not isinstance(draft, ResponseDraft):
            draft = ResponseDraft.model_validate(draft)
        with self._lock:
            self._stored_schema(draft.assessment_schema_id)
            response_id = self._assign_id(RESPONSE_ID_PREFIX, self._responses, "responses")
            response = Response(
                id=response_id,
                assessment_schema_id=draft.assessment_schema_id,
                respondent_id=draft.respondent_id,
                answers=dict(draft.answers),
                completed_at=utcnow(),
                score=draft.score,
            ).model_copy(deep=True)
            responses = dict(self._responses)
            responses[response_id] = response
            self._commit(self._schemas, responses)
        logger.info(f"Response {response_id} stored for schema {draft.assessment_schema_id} "
                    f"(respondent {draft.respondent_id}, score {draft.score})")
        return response.model_copy(deep=True)

    def backfill_score(self, response_id: str, score: int) -> Response:
        """Set the score of a response that was stored without one."""
        with self._lock:
            current = self._stored_response(response_id)
            if current.score is not None:
                raise ResponseImmutable(response_id)
            updated = Response.model_validate({**current.model_dump(), "score": score})
            responses = dict(self._responses)
            responses[response_id] = updated
            self._commit(self._schemas, responses)
        logger.info(f"Response {response_id} score backfilled to {score}")
        return updated.model_copy(deep=True)

    # ============================================================
    # READERS
    # ============================================================

    def get_schema(self, schema_id: str) -> AssessmentSchema:
        with self._lock:
            return self._stored_schema(schema_id).model_copy(deep=True)

    def get_response(self, response_id: str) -> Response:
        with self._lock:
            return self._stored_response(response_id).model_copy(deep=True)

    def list_schemas(self, search: Optional[str] = None, category: Optional[str] = None) -> List[AssessmentSchema]:
        """Schemas in creation order, filtered by case-insensitive text search and exact category."""
        needle = search.strip().lower() if search else ""
        with self._lock:
            result = []
            for schema in self._schemas.values():
                if category and schema.category != category:
                    continue
                if needle and needle not in schema.title.lower() and needle not in schema.description.lower():
                    continue
                result.append(schema.model_copy(deep=True))
            return result

    def list_categories(self) -> List[str]:
        with self._lock:
            seen: List[str] = []
            for schema in self._schemas.values():
                if schema.category not in seen:
                    seen.append(schema.category)
            return seen

    def list_responses(self, schema_id: Optional[str] = None) -> List[Response]:
        with self._lock:
            return [
                r.model_copy(deep=True)
                for r in self._responses.values()
                if schema_id is None or r.assessment_schema_id == schema_id
            ]

    def responses_for_respondent(self, respondent_id: str) -> List[Response]:
        with self._lock:
            return [r.model_copy(deep=True) for r in self._responses.values() if r.respondent_id == respondent_id]

    def schema_count(self) -> int:
        with self._lock:
            return len(self._schemas)

    def response_count(self) -> int:
        with self._lock:
            return len(self._responses)


def build_repository(backend: Optional[PersistenceBackend] = None,
                     seed: Optional[bool] = None) -> AssessmentRepository:
    """Repository wired from configuration."""
    repository = AssessmentRepository(backend if backend is not None else build_backend())
    if config.SEED_TEMPLATES if seed is None else seed:
        repository.seed_templates()
    return repository
