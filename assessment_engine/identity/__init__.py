"""
Identity Module

Supplies the current actor ({id, role}) to the engine. Role gates schema
mutations: only admins may create, update or delete assessment schemas.
"""

from .models import Actor, Role
from .provider import DEMO_ACCOUNTS, DemoIdentityProvider, require_admin

__all__ = [
    "Actor",
    "Role",
    "DEMO_ACCOUNTS",
    "DemoIdentityProvider",
    "require_admin",
]
