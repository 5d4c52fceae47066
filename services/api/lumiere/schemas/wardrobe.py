from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class WardrobeCreate(BaseModel):
    image_data: str | None = None
    analysis: dict[str, Any] = Field(default_factory=dict)
    recommendations: list[dict[str, Any]] = Field(default_factory=list)


class WardrobeCreated(BaseModel):
    id: int


class WardrobeEntryOut(BaseModel):
    id: int
    image_data: str | None = None
    analysis: dict[str, Any]
    recommendations: list[dict[str, Any]]
    created_at: datetime | None = None
