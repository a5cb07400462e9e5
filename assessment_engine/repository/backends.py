"""
Persistence Backends

A backend loads both collections at start and receives the full updated
collections on every save. Payloads are JSON-serializable lists of dicts;
the encoding is opaque to the repository.

Backends:
- InMemoryBackend: process-local, for tests and demos
- JsonFileBackend: one JSON document on disk
- PostgresBackend: one JSONB row per collection
"""

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import psycopg2
from psycopg2.extras import RealDictCursor

from assessment_engine import config

logger = logging.getLogger(__name__)

SCHEMAS_KEY = "assessment_schemas"
RESPONSES_KEY = "responses"

Collections = Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]


class PersistenceBackend:
    """Interface: load() -> (schemas, responses); save(schemas, responses)."""

    name = "abstract"

    def load(self) -> Collections:
        raise NotImplementedError

    def save(self, schemas: List[Dict[str, Any]], responses: List[Dict[str, Any]]) -> None:
        raise NotImplementedError


class InMemoryBackend(PersistenceBackend):

    name = "memory"

    def __init__(self, schemas: Optional[List[Dict[str, Any]]] = None,
                 responses: Optional[List[Dict[str, Any]]] = None):
        self._schemas = copy.deepcopy(schemas or [])
        self._responses = copy.deepcopy(responses or [])
        self.save_count = 0

    def load(self) -> Collections:
        return copy.deepcopy(self._schemas), copy.deepcopy(self._responses)

    def save(self, schemas: List[Dict[str, Any]], responses: List[Dict[str, Any]]) -> None:
        self._schemas = copy.deepcopy(schemas)
        self._responses = copy.deepcopy(responses)
        self.save_count += 1


class JsonFileBackend(PersistenceBackend):
    """
    Single JSON document: {"assessment_schemas": [...], "responses": [...]}.

    Writes go to a temp file in the same directory and are renamed into place.
    """

    name = "json"

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> Collections:
        if not self.path.exists():
            logger.info(f"No state file at {self.path}, starting empty")
            return [], []
        with open(self.path, "r", encoding="utf-8") as f:
            document = json.load(f)
        schemas = document.get(SCHEMAS_KEY, [])
        responses = document.get(RESPONSES_KEY, [])
        logger.info(f"Loaded {len(schemas)} schemas and {len(responses)} responses from {self.path}")
        return schemas, responses

    def save(self, schemas: List[Dict[str, Any]], responses: List[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        document = {SCHEMAS_KEY: schemas, RESPONSES_KEY: responses}
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise


class PostgresBackend(PersistenceBackend):
    """
    Stores each collection as a JSONB payload in assessment_state.

    Both collections are written in one transaction.
    """

    name = "postgres"

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("PostgresBackend requires a database URL")
        self._db_url = database_url
        self._table_ready = False

    def _get_conn(self):
        return psycopg2.connect(self._db_url, cursor_factory=RealDictCursor)

    def _ensure_table(self, conn) -> None:
        if self._table_ready:
            return
        cur = conn.cursor()
        cur.execute("""
            CREATE TABLE IF NOT EXISTS assessment_state (
                key VARCHAR(64) PRIMARY KEY,
                payload JSONB NOT NULL,
                updated_at TIMESTAMPTZ DEFAULT NOW()
            )
        """)
        conn.commit()
        cur.close()
        self._table_ready = True

    def load(self) -> Collections:
        conn = self._get_conn()
        try:
            self._ensure_table(conn)
            cur = conn.cursor()
            cur.execute("SELECT key, payload FROM assessment_state")
            rows = {row["key"]: row["payload"] for row in cur.fetchall()}
            cur.close()
        finally:
            conn.close()

        def _decode(payload):
            if payload is None:
                return []
            if isinstance(payload, str):
                return json.loads(payload)
            return payload

        schemas = _decode(rows.get(SCHEMAS_KEY))
        responses = _decode(rows.get(RESPONSES_KEY))
        logger.info(f"Loaded {len(schemas)} schemas and {len(responses)} responses from PostgreSQL")
        return schemas, responses

    def save(self, schemas: List[Dict[str, Any]], responses: List[Dict[str, Any]]) -> None:
        conn = self._get_conn()
        try:
            self._ensure_table(conn)
            cur = conn.cursor()
            for key, payload in ((SCHEMAS_KEY, schemas), (RESPONSES_KEY, responses)):
                cur.execute("""
                    INSERT INTO assessment_state (key, payload, updated_at)
                    VALUES (%s, %s, NOW())
                    ON CONFLICT (key) DO UPDATE
                    SET payload = EXCLUDED.payload, updated_at = NOW()
                """, (key, json.dumps(payload)))
            conn.commit()
            cur.close()
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to save assessment state: {e}")
            raise
        finally:
            conn.close()


def build_backend(store: Optional[str] = None) -> PersistenceBackend:
    """Backend selected by ASSESSMENT_STORE."""
    store = (store or config.ASSESSMENT_STORE).lower()
    if store == "memory":
        return InMemoryBackend()
    if store == "json":
        return JsonFileBackend(config.ASSESSMENT_DATA_PATH)
    if store == "postgres":
        return PostgresBackend(config.DATABASE_URL)
    raise ValueError(f"Unknown ASSESSMENT_STORE '{store}' (expected memory, json or postgres)")
