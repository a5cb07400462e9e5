"""
Auth Endpoints (demo identity)

Endpoints:
- POST /api/v1/auth/login - Open a session for a demo account
- POST /api/v1/auth/register - Create a user-role account
- POST /api/v1/auth/logout - Close the current session
- GET /api/v1/auth/me - Current actor
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from assessment_engine.dependencies import get_current_actor, get_identity_provider, get_session_token
from assessment_engine.identity import Actor, DemoIdentityProvider

router = APIRouter(
    prefix="/api/v1/auth",
    tags=["auth"],
)


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    token: str
    actor: Actor


@router.post("/login", response_model=SessionResponse)
def login(request: LoginRequest, identity: DemoIdentityProvider = Depends(get_identity_provider)):
    session = identity.login(request.email, request.password)
    if session is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    token, actor = session
    return SessionResponse(token=token, actor=actor)


@router.post("/register", response_model=SessionResponse)
def register(request: RegisterRequest, identity: DemoIdentityProvider = Depends(get_identity_provider)):
    session = identity.register(request.email, request.password, request.name)
    if session is None:
        raise HTTPException(status_code=409, detail="Email already registered")
    token, actor = session
    return SessionResponse(token=token, actor=actor)


@router.post("/logout")
def logout(
    token: str = Depends(get_session_token),
    identity: DemoIdentityProvider = Depends(get_identity_provider),
):
    return {"status": "ok", "closed": identity.logout(token)}


@router.get("/me", response_model=Actor)
def me(actor: Actor = Depends(get_current_actor)):
    return actor
