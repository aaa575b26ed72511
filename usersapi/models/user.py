from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class User(BaseModel):
    id: int
    username: str
    email: str
    created_at: datetime


class NewUser(BaseModel):
    """Payload for create and update; update replaces both fields."""

    username: str
    email: str
