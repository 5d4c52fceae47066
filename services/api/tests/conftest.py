from __future__ import annotations

import asyncio
import copy
from io import BytesIO
from pathlib import Path
from typing import Any, Sequence

import pytest
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import lumiere.models  # noqa: F401  registers tables on Base.metadata
from lumiere.db.base import Base
from lumiere.services.gateway import AspectRatio, GatewayContent, ImagePayload


class FakeGateway:
    """
    Scriptable stand-in for the generative gateway.

    `image_errors` and `image_delays` are keyed by a substring of the image prompt;
    the first matching key applies.
    """

    def __init__(
        self,
        payload: dict[str, Any] | None = None,
        error: BaseException | None = None,
        image_errors: dict[str, BaseException] | None = None,
        image_delays: dict[str, float] | None = None,
    ) -> None:
        self.payload = payload or {}
        self.error = error
        self.image_errors = image_errors or {}
        self.image_delays = image_delays or {}
        self.generate_calls: list[dict[str, Any]] = []
        self.image_calls: list[tuple[str, AspectRatio]] = []
        self.completed_images: list[str] = []

    async def generate(
        self,
        model_id: str,
        contents: Sequence[GatewayContent],
        response_schema: dict[str, Any],
        system_instruction: str | None = None,
        web_search: bool = False,
    ) -> dict[str, Any]:
        self.generate_calls.append(
            {
                "model_id": model_id,
                "contents": list(contents),
                "response_schema": response_schema,
                "system_instruction": system_instruction,
                "web_search": web_search,
            }
        )
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.payload)

    async def generate_image(self, model_id: str, prompt: str, aspect_ratio: AspectRatio) -> ImagePayload:
        self.image_calls.append((prompt, aspect_ratio))
        delay = next((d for key, d in self.image_delays.items() if key in prompt), 0.0)
        await asyncio.sleep(delay)
        for key, exc in self.image_errors.items():
            if key in prompt:
                raise exc
        self.completed_images.append(prompt)
        return ImagePayload(data=f"img:{prompt}".encode("utf-8"), mime_type="image/png")


@pytest.fixture()
def fake_gateway_cls() -> type[FakeGateway]:
    return FakeGateway


@pytest.fixture()
def session_factory(tmp_path: Path):
    db_path = tmp_path / "test.db"
    engine = create_engine(
        f"sqlite+pysqlite:///{db_path}",
        future=True,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
    finally:
        engine.dispose()


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def sample_image_bytes() -> bytes:
    buf = BytesIO()
    Image.new("RGB", (320, 400), color=(170, 160, 150)).save(buf, "JPEG")
    return buf.getvalue()


@pytest.fixture()
def analysis_payload() -> dict[str, Any]:
    return {
        "analysis": {
            "color": "Indigo",
            "pattern": "Solid",
            "style": "Casual",
            "category": "Shirt",
            "description": "A relaxed indigo linen shirt with a camp collar.",
        },
        "recommendations": [
            {
                "name": "Beige Chinos",
                "category": "Trousers",
                "reason": "Neutral base that lets the indigo lead.",
                "platform": "Myntra",
                "priceRange": "₹1,499 - ₹2,199",
                "imageUrl": "https://example.com/chinos.jpg",
                "purchaseUrl": "https://www.example.com/chinos",
                "matchScore": 92,
            },
            {
                "name": "White Leather Sneakers",
                "category": "Shoes",
                "reason": "Clean finish for a summer look.",
                "platform": "Amazon.in",
                "priceRange": "₹2,999 - ₹3,999",
                "imageUrl": "",
                "purchaseUrl": "https://www.amazon.in/dp/B0EXAMPLE",
                "matchScore": 88.6,
            },
            {
                "name": "Tan Woven Belt",
                "category": "Accessory",
                "reason": "Picks up the warmth of the chinos.",
                "platform": "Local boutique",
                "priceRange": "₹799 - ₹1,199",
                "imageUrl": "",
                "purchaseUrl": "not a url",
                "matchScore": 75,
            },
        ],
    }


@pytest.fixture()
def chat_payload() -> dict[str, Any]:
    return {
        "friendlyResponse": "- **The Vision**: Coastal ease.\n- **Stylist Tip**: Roll the sleeves.",
        "visualPrompt": "indigo linen shirt, beige chinos, white sneakers on a sunlit terrace",
        "hairVisualPrompt": "soft textured crop with a matte finish",
        "recommendations": [
            {
                "name": "Straw Panama Hat",
                "category": "Accessory",
                "reason": "Adds shade and polish.",
                "platform": "Ajio",
                "priceRange": "₹999",
                "purchaseUrl": "",
            },
            {
                "name": "Canvas Tote",
                "category": "Bag",
                "reason": "Easy weekend carry.",
                "platform": "Flipkart",
                "priceRange": "₹599",
                "purchaseUrl": "https://www.flipkart.com/canvas-tote/p/itm123",
            },
        ],
    }
