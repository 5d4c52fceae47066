from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, field_validator


class ChatMessageIn(BaseModel):
    role: Literal["user", "assistant"]
    content: str = ""

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().lower()
            return "assistant" if value == "model" else value
        return value


class ChatMessageOut(BaseModel):
    id: int
    role: str
    content: str
    created_at: datetime | None = None


class ChatAppended(BaseModel):
    status: str = "ok"
