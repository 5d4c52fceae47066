from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from pydantic import ValidationError

from lumiere.core.config import settings
from lumiere.core.context import operation_ctx
from lumiere.schemas.styling import AnalysisResult, ChatTurnResult, ConversationTurn, FashionAttributes, Recommendation
from lumiere.services.failures import AnalysisFailed, ErrorKind, StylingQuotaExceeded, classify
from lumiere.services.gateway import GatewayContent, ImagePayload, StylingGateway
from lumiere.services.illustrator import IllustratedRecommendation, IllustrationOutcome, Illustrator, SceneKind
from lumiere.services.prompts import (
    ANALYSIS_RESPONSE_SCHEMA,
    ANALYZE_PROMPT,
    DEFAULT_CHAT_MESSAGE,
    EMPTY_NARRATIVE_FALLBACK,
    QUOTA_APOLOGY,
    QUOTA_DISCLAIMER,
    STYLIST_RESPONSE_SCHEMA,
    STYLIST_SYSTEM_INSTRUCTION,
)

logger = logging.getLogger(__name__)

_GATEWAY_ROLES = {"user": "user", "assistant": "model"}


@dataclass(slots=True)
class AnalysisReport:
    result: AnalysisResult
    illustrations: list[IllustrationOutcome] = field(default_factory=list)


@dataclass(slots=True)
class ChatReport:
    result: ChatTurnResult
    scenes: dict[SceneKind, IllustrationOutcome] = field(default_factory=dict)
    illustrations: list[IllustrationOutcome] = field(default_factory=list)
    degraded: bool = False


class StylistPipeline:
    """
    Describe/converse once, then fan out illustration calls and join them.

    Stage one failures terminate the operation with a typed outcome; stage two
    (illustration) failures are absorbed into placeholders. Results keep the
    order of the recommendations the model returned.
    """

    def __init__(
        self,
        gateway: StylingGateway,
        text_model: str | None = None,
        image_model: str | None = None,
        web_search: bool | None = None,
        placeholder_base: str | None = None,
    ) -> None:
        self.gateway = gateway
        self.text_model = text_model or settings.text_model
        self.web_search = settings.analysis_web_search if web_search is None else web_search
        self.illustrator = Illustrator(gateway, image_model=image_model, placeholder_base=placeholder_base)

    async def analyze_item(self, image: ImagePayload) -> AnalysisResult:
        report = await self.run_analysis(image)
        return report.result

    async def continue_chat(
        self,
        message: str,
        image: ImagePayload | None = None,
        history: Sequence[ConversationTurn] = (),
    ) -> ChatTurnResult:
        report = await self.run_chat(message, image=image, history=history)
        return report.result

    async def run_analysis(self, image: ImagePayload) -> AnalysisReport:
        token = operation_ctx.set("analyze_item")
        try:
            logger.info("stylist_analyze_start size=%d mime=%s", len(image.data), image.mime_type)
            try:
                raw = await self.gateway.generate(
                    self.text_model,
                    [GatewayContent(role="user", parts=[ANALYZE_PROMPT, image])],
                    ANALYSIS_RESPONSE_SCHEMA,
                    web_search=self.web_search,
                )
            except Exception as exc:
                logger.exception("stylist_analyze_failed")
                if classify(exc) is ErrorKind.QUOTA_EXHAUSTED:
                    raise StylingQuotaExceeded("STYLING_QUOTA_EXCEEDED") from exc
                raise AnalysisFailed(f"{type(exc).__name__}: {exc}") from exc

            try:
                attributes = FashionAttributes.model_validate(raw.get("analysis"))
            except ValidationError as exc:
                logger.warning("stylist_analyze_invalid_payload errors=%d", exc.error_count())
                raise AnalysisFailed("model returned an unusable analysis payload") from exc
            described = AnalysisResult(
                attributes=attributes,
                recommendations=_parse_recommendations(raw.get("recommendations")),
            )

            illustrated = await self._illustrate_all(described.recommendations)
            result = described.model_copy(update={"recommendations": [i.recommendation for i in illustrated]})
            logger.info(
                "stylist_analyze_done category=%s recommendations=%d placeholders=%d",
                result.attributes.category,
                len(result.recommendations),
                sum(1 for i in illustrated if i.outcome.failure is not None),
            )
            return AnalysisReport(result=result, illustrations=[i.outcome for i in illustrated])
        finally:
            operation_ctx.reset(token)

    async def run_chat(
        self,
        message: str,
        image: ImagePayload | None = None,
        history: Sequence[ConversationTurn] = (),
    ) -> ChatReport:
        token = operation_ctx.set("continue_chat")
        try:
            contents = _history_contents(history)
            current_image = image or _latest_history_image(history)
            parts: list[str | ImagePayload] = [message.strip() or DEFAULT_CHAT_MESSAGE]
            if current_image is not None:
                parts.append(current_image)
            contents.append(GatewayContent(role="user", parts=parts))
            logger.info(
                "stylist_chat_start history=%d has_image=%s",
                len(history),
                current_image is not None,
            )

            try:
                raw = await self.gateway.generate(
                    self.text_model,
                    contents,
                    STYLIST_RESPONSE_SCHEMA,
                    system_instruction=STYLIST_SYSTEM_INSTRUCTION,
                )
            except Exception as exc:
                if classify(exc) is ErrorKind.QUOTA_EXHAUSTED:
                    logger.warning("stylist_chat_quota_exhausted")
                    return ChatReport(
                        result=ChatTurnResult(text=QUOTA_APOLOGY, quota_limited=True),
                        degraded=True,
                    )
                logger.exception("stylist_chat_failed")
                raise

            return await self._illustrate_chat(raw)
        finally:
            operation_ctx.reset(token)

    async def _illustrate_all(self, recommendations: Sequence[Recommendation]) -> list[IllustratedRecommendation]:
        # gather returns results in argument order, not completion order.
        return list(await asyncio.gather(*(self.illustrator.finalize(r) for r in recommendations)))

    async def _illustrate_chat(self, raw: dict[str, Any]) -> ChatReport:
        narrative = _text(raw.get("friendlyResponse")) or EMPTY_NARRATIVE_FALLBACK
        descriptions = {
            SceneKind.OUTFIT: _text(raw.get("visualPrompt")),
            SceneKind.HAIR: _text(raw.get("hairVisualPrompt")),
        }
        recommendations = _parse_recommendations(raw.get("recommendations"))

        scene_kinds = [kind for kind, description in descriptions.items() if description]
        batch = await asyncio.gather(
            *(self.illustrator.render_scene(kind, descriptions[kind]) for kind in scene_kinds),
            *(self.illustrator.finalize(r) for r in recommendations),
        )
        scenes: dict[SceneKind, IllustrationOutcome] = dict(zip(scene_kinds, batch[: len(scene_kinds)]))
        illustrated: list[IllustratedRecommendation] = list(batch[len(scene_kinds):])

        images = {kind: outcome.image_url for kind, outcome in scenes.items()}
        quota_hit = any(outcome.quota_exhausted for outcome in scenes.values())
        if quota_hit:
            narrative += QUOTA_DISCLAIMER
            for kind in SceneKind:
                if not images.get(kind):
                    images[kind] = self.illustrator.scene_placeholder(kind, descriptions[kind])

        result = ChatTurnResult(
            text=narrative,
            outfit_image_url=images.get(SceneKind.OUTFIT, ""),
            hair_image_url=images.get(SceneKind.HAIR, ""),
            recommendations=[i.recommendation for i in illustrated],
            quota_limited=quota_hit,
        )
        logger.info(
            "stylist_chat_done scenes=%s recommendations=%d quota_limited=%s",
            ",".join(f"{k.value}:{o.source.value}" for k, o in scenes.items()) or "none",
            len(result.recommendations),
            quota_hit,
        )
        return ChatReport(
            result=result,
            scenes=scenes,
            illustrations=[i.outcome for i in illustrated],
            degraded=quota_hit,
        )


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _history_contents(history: Sequence[ConversationTurn]) -> list[GatewayContent]:
    # Attached images are not resent; only the most recent one rides on the current turn.
    return [
        GatewayContent(role=_GATEWAY_ROLES[turn.role], parts=[turn.text])
        for turn in history
        if turn.text.strip()
    ]


def _latest_history_image(history: Sequence[ConversationTurn]) -> ImagePayload | None:
    for turn in reversed(history):
        if not turn.attached_image:
            continue
        try:
            return ImagePayload.from_reference(turn.attached_image)
        except ValueError:
            logger.warning("stylist_history_image_unreadable role=%s", turn.role)
    return None


def _parse_recommendations(raw: Any) -> list[Recommendation]:
    if not isinstance(raw, list):
        return []
    out: list[Recommendation] = []
    for item in raw:
        try:
            out.append(Recommendation.model_validate(item))
        except ValidationError:
            logger.warning("stylist_recommendation_skipped")
    return out
