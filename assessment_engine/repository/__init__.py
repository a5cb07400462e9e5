"""
Repository Module

Owns the assessment schema and response collections and mirrors them to a
persistence backend with an explicit save after every mutation.
"""

from .backends import (
    InMemoryBackend,
    JsonFileBackend,
    PersistenceBackend,
    PostgresBackend,
    build_backend,
)
from .repository import AssessmentRepository, TokenIdGenerator, build_repository

__all__ = [
    "AssessmentRepository",
    "TokenIdGenerator",
    "build_repository",
    "PersistenceBackend",
    "InMemoryBackend",
    "JsonFileBackend",
    "PostgresBackend",
    "build_backend",
]
