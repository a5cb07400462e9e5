"""
Shared FastAPI dependencies.

Process-wide singletons for the repository, identity provider and insight
registry. Tests swap them through app.dependency_overrides.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException

from assessment_engine.identity import Actor, DemoIdentityProvider
from assessment_engine.insights import InsightRegistry, get_default_registry
from assessment_engine.repository import AssessmentRepository, build_repository

_repository: Optional[AssessmentRepository] = None
_identity: Optional[DemoIdentityProvider] = None


def get_repository() -> AssessmentRepository:
    global _repository
    if _repository is None:
        _repository = build_repository()
    return _repository


def get_identity_provider() -> DemoIdentityProvider:
    global _identity
    if _identity is None:
        _identity = DemoIdentityProvider()
    return _identity


def get_insight_registry() -> InsightRegistry:
    return get_default_registry()


def get_session_token(x_session_token: str = Header(None, alias="X-Session-Token")) -> str:
    if not x_session_token:
        raise HTTPException(status_code=401, detail="Missing X-Session-Token header")
    return x_session_token


def get_current_actor(
    token: str = Depends(get_session_token),
    identity: DemoIdentityProvider = Depends(get_identity_provider),
) -> Actor:
    """
    Resolve the session token to an actor.

    Raises 401 if the session is unknown. Role checks happen in the engine.
    """
    actor = identity.resolve(token)
    if actor is None:
        raise HTTPException(status_code=401, detail="Invalid or expired session")
    return actor
