"""
Identity Models
"""

from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


class Actor(BaseModel):
    """The caller of an engine operation."""
    id: str
    email: str = ""
    name: str = ""
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
