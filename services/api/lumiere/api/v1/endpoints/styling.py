from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, Request, UploadFile, status
from sqlalchemy.orm import Session

from lumiere.api.deps import get_db, get_session_factory, get_stylist
from lumiere.core.config import settings
from lumiere.schemas.styling import AnalyzeResponse, ChatTurnResult, StylistChatRequest
from lumiere.services.failures import AnalysisFailed, StylingQuotaExceeded
from lumiere.services.gateway import GatewayError, ImagePayload
from lumiere.services.prompts import DEFAULT_CHAT_MESSAGE
from lumiere.services.stylist import StylistPipeline
from lumiere.services.wardrobe import insert_wardrobe_item, record_chat_exchange

router = APIRouter()

QUOTA_DETAIL = "I've reached my daily styling limit. Please try again in a little while!"
ANALYSIS_FAILED_DETAIL = "Styling analysis failed. Please try again."
CHAT_FAILED_DETAIL = "The stylist is unavailable right now. Please try again."


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_item(
    request: Request,
    image: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    stylist: StylistPipeline = Depends(get_stylist),
) -> AnalyzeResponse:
    content_type: str | None
    if image is not None:
        payload = await image.read()
        content_type = image.content_type or "application/octet-stream"
    else:
        payload = await request.body()
        content_type = request.headers.get("content-type", "application/octet-stream")

    if not payload:
        raise HTTPException(status_code=400, detail="Empty image payload")
    if len(payload) > settings.max_upload_bytes:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Image payload too large")
    if not (content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail=f"Unsupported content type: {content_type}")

    upload = ImagePayload(data=payload, mime_type=content_type.split(";", 1)[0].strip())
    try:
        result = await stylist.analyze_item(upload)
    except StylingQuotaExceeded:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=QUOTA_DETAIL)
    except AnalysisFailed:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=ANALYSIS_FAILED_DETAIL)

    item_id = insert_wardrobe_item(
        db,
        image_data=upload.to_data_url(),
        analysis=result.attributes.model_dump(by_alias=True, exclude_none=True),
        recommendations=[r.model_dump(by_alias=True) for r in result.recommendations],
    )
    return AnalyzeResponse(id=item_id, analysis=result.attributes, recommendations=result.recommendations)


@router.post("/chat", response_model=ChatTurnResult)
async def stylist_chat(
    payload: StylistChatRequest,
    background_tasks: BackgroundTasks,
    stylist: StylistPipeline = Depends(get_stylist),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> ChatTurnResult:
    upload: ImagePayload | None = None
    if payload.image:
        try:
            upload = ImagePayload.from_reference(payload.image)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
    if not payload.message.strip() and upload is None:
        raise HTTPException(status_code=400, detail="A message or an image is required")

    message = payload.message.strip() or DEFAULT_CHAT_MESSAGE
    try:
        result = await stylist.continue_chat(message, image=upload, history=payload.history)
    except GatewayError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=CHAT_FAILED_DETAIL)

    background_tasks.add_task(record_chat_exchange, session_factory, message, result.text)
    return result
