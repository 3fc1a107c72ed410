"""
importhub/schemas/principal.py
Roles and the authenticated Principal model.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


class Principal(BaseModel):
    id: int = Field(..., description="users.id of the caller")
    role: Role = Field(..., description="admin | user")
    username: Optional[str] = Field(None, description="Display name (if any)")
    email: Optional[str] = Field(None, description="E-mail (if any)")
