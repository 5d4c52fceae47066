from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from lumiere.core.config import settings
from lumiere.schemas.styling import Recommendation
from lumiere.services.failures import ErrorKind, classify
from lumiere.services.gateway import AspectRatio, StylingGateway
from lumiere.services.prompts import hair_scene_prompt, outfit_scene_prompt, product_photo_prompt
from lumiere.services.purchase_links import encode_query, repair_url

logger = logging.getLogger(__name__)

PRODUCT_PLACEHOLDER_SIZE = (400, 400)
OUTFIT_PLACEHOLDER_SIZE = (800, 1200)
HAIR_PLACEHOLDER_SIZE = (800, 800)
OUTFIT_DEFAULT_SEED = "fashion"
HAIR_DEFAULT_SEED = "hair"
PRODUCT_DEFAULT_SEED = "product"


class ImageSource(str, Enum):
    GENERATED = "generated"
    PLACEHOLDER = "placeholder"
    MISSING = "missing"


class SceneKind(str, Enum):
    OUTFIT = "outfit"
    HAIR = "hair"


@dataclass(slots=True, frozen=True)
class IllustrationOutcome:
    image_url: str
    source: ImageSource
    failure: ErrorKind | None = None
    reason: str | None = None

    @property
    def quota_exhausted(self) -> bool:
        return self.failure is ErrorKind.QUOTA_EXHAUSTED


@dataclass(slots=True, frozen=True)
class IllustratedRecommendation:
    recommendation: Recommendation
    outcome: IllustrationOutcome


def placeholder_image_url(seed: str, size: tuple[int, int], base: str | None = None) -> str:
    width, height = size
    root = (base or settings.placeholder_image_base).rstrip("/")
    return f"{root}/{encode_query(seed)}/{width}/{height}"


class Illustrator:
    """Best-effort image generation. Never raises for gateway failures."""

    def __init__(
        self,
        gateway: StylingGateway,
        image_model: str | None = None,
        placeholder_base: str | None = None,
    ) -> None:
        self.gateway = gateway
        self.image_model = image_model or settings.image_model
        self.placeholder_base = placeholder_base or settings.placeholder_image_base

    async def illustrate(self, recommendation: Recommendation) -> IllustrationOutcome:
        prompt = product_photo_prompt(recommendation.name, recommendation.category)
        try:
            image = await self.gateway.generate_image(self.image_model, prompt, AspectRatio.SQUARE)
        except Exception as exc:
            kind = classify(exc)
            if kind is ErrorKind.QUOTA_EXHAUSTED:
                logger.debug("illustration_quota_exhausted name=%s", recommendation.name)
            else:
                logger.exception("illustration_failed name=%s", recommendation.name)
            return IllustrationOutcome(
                image_url=placeholder_image_url(
                    recommendation.name.strip() or PRODUCT_DEFAULT_SEED,
                    PRODUCT_PLACEHOLDER_SIZE,
                    self.placeholder_base,
                ),
                source=ImageSource.PLACEHOLDER,
                failure=kind,
                reason=str(exc),
            )
        return IllustrationOutcome(image_url=image.to_data_url(), source=ImageSource.GENERATED)

    async def finalize(self, recommendation: Recommendation) -> IllustratedRecommendation:
        purchase_url = repair_url(recommendation)
        outcome = await self.illustrate(recommendation)
        final = recommendation.model_copy(update={"purchase_url": purchase_url, "image_url": outcome.image_url})
        return IllustratedRecommendation(recommendation=final, outcome=outcome)

    async def render_scene(self, kind: SceneKind, description: str) -> IllustrationOutcome:
        """
        Generate the outfit (3:4) or hairstyle (1:1) scene.

        Unlike product shots there is no placeholder here: a failed scene comes back
        MISSING with its ErrorKind, and the caller decides whether to backfill.
        """
        if kind is SceneKind.OUTFIT:
            prompt, aspect_ratio = outfit_scene_prompt(description), AspectRatio.PORTRAIT
        else:
            prompt, aspect_ratio = hair_scene_prompt(description), AspectRatio.SQUARE
        try:
            image = await self.gateway.generate_image(self.image_model, prompt, aspect_ratio)
        except Exception as exc:
            failure = classify(exc)
            if failure is ErrorKind.QUOTA_EXHAUSTED:
                logger.debug("scene_illustration_quota_exhausted kind=%s", kind.value)
            else:
                logger.exception("scene_illustration_failed kind=%s", kind.value)
            return IllustrationOutcome(image_url="", source=ImageSource.MISSING, failure=failure, reason=str(exc))
        return IllustrationOutcome(image_url=image.to_data_url(), source=ImageSource.GENERATED)

    def scene_placeholder(self, kind: SceneKind, description: str) -> str:
        if kind is SceneKind.OUTFIT:
            return placeholder_image_url(description or OUTFIT_DEFAULT_SEED, OUTFIT_PLACEHOLDER_SIZE, self.placeholder_base)
        return placeholder_image_url(description or HAIR_DEFAULT_SEED, HAIR_PLACEHOLDER_SIZE, self.placeholder_base)
