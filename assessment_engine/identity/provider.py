"""
Demo Identity Provider

Stand-in for a real identity service: two fixed demo accounts, open
registration of user-role accounts, and opaque session tokens held in memory.
Not an authentication system.
"""

import logging
import secrets
from threading import Lock
from typing import Dict, Optional, Tuple

from assessment_engine.errors import Forbidden

from .models import Actor, Role

logger = logging.getLogger(__name__)

DEMO_ACCOUNTS = {
    "admin@test.com": ("admin123", Actor(id="1", email="admin@test.com", name="Admin User", role=Role.ADMIN)),
    "user@test.com": ("user123", Actor(id="2", email="user@test.com", name="Test User", role=Role.USER)),
}


def require_admin(actor: Optional[Actor], operation: str) -> Actor:
    """Raise Forbidden unless the actor holds the admin role."""
    if actor is None or not actor.is_admin:
        raise Forbidden(operation, actor_id=actor.id if actor else None)
    return actor


class DemoIdentityProvider:

    def __init__(self):
        self._accounts: Dict[str, Tuple[str, Actor]] = dict(DEMO_ACCOUNTS)
        self._sessions: Dict[str, Actor] = {}
        self._lock = Lock()

    def _open_session(self, actor: Actor) -> str:
        token = secrets.token_urlsafe(24)
        self._sessions[token] = actor
        return token

    def login(self, email: str, password: str) -> Optional[Tuple[str, Actor]]:
        """Return (token, actor) for valid demo credentials, else None."""
        with self._lock:
            account = self._accounts.get(email.strip().lower())
            if account is None or account[0] != password:
                logger.info(f"Login failed for {email}")
                return None
            actor = account[1]
            token = self._open_session(actor)
        logger.info(f"Login succeeded for actor {actor.id} ({actor.role.value})")
        return token, actor

    def register(self, email: str, password: str, name: str) -> Optional[Tuple[str, Actor]]:
        """Create a user-role account and open a session. None if the email is taken."""
        key = email.strip().lower()
        with self._lock:
            if not key or key in self._accounts:
                return None
            actor = Actor(id=secrets.token_hex(5), email=key, name=name.strip(), role=Role.USER)
            self._accounts[key] = (password, actor)
            token = self._open_session(actor)
        logger.info(f"Registered actor {actor.id}")
        return token, actor

    def resolve(self, token: Optional[str]) -> Optional[Actor]:
        if not token:
            return None
        return self._sessions.get(token)

    def logout(self, token: str) -> bool:
        with self._lock:
            return self._sessions.pop(token, None) is not None
