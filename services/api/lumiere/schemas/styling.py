from __future__ import annotations

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FashionAttributes(_CamelModel):
    color: str = ""
    pattern: str = ""
    style: str = ""
    category: str = ""
    description: str = ""
    hair_style: str | None = None
    hair_color: str | None = None


class Recommendation(_CamelModel):
    model_config = ConfigDict(frozen=True)

    name: str
    category: str = ""
    reason: str = ""
    platform: str = ""
    price_range: str = ""
    match_score: int | None = None
    purchase_url: str = ""
    image_url: str = ""

    @field_validator("platform", "purchase_url", "image_url", "category", "reason", "price_range", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("match_score", mode="before")
    @classmethod
    def _clamp_score(cls, value: object) -> int | None:
        if value is None or value == "":
            return None
        score = float(value)  # type: ignore[arg-type]
        if not math.isfinite(score):
            return None
        return max(0, min(100, round(score)))


class AnalysisResult(_CamelModel):
    attributes: FashionAttributes = Field(alias="analysis")
    recommendations: list[Recommendation] = Field(default_factory=list)

    @field_validator("recommendations", mode="before")
    @classmethod
    def _null_to_empty(cls, value: object) -> object:
        return [] if value is None else value


class ConversationTurn(_CamelModel):
    role: Literal["user", "assistant"]
    text: str = ""
    attached_image: str | None = None
    outfit_image_url: str | None = None
    hair_image_url: str | None = None
    recommendations: list[Recommendation] = Field(default_factory=list)

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value: object) -> object:
        if isinstance(value, str) and value.strip().lower() == "model":
            return "assistant"
        return value.strip().lower() if isinstance(value, str) else value


class ChatTurnResult(_CamelModel):
    text: str
    outfit_image_url: str = ""
    hair_image_url: str = ""
    recommendations: list[Recommendation] = Field(default_factory=list)
    quota_limited: bool = False


class StylistChatRequest(_CamelModel):
    message: str = ""
    image: str | None = None
    history: list[ConversationTurn] = Field(default_factory=list)


class AnalyzeResponse(_CamelModel):
    id: int
    analysis: FashionAttributes
    recommendations: list[Recommendation]
