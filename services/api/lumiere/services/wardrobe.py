from __future__ import annotations

import logging
from typing import Any, Callable

from sqlalchemy.orm import Session

from lumiere.models import ChatMessage, WardrobeItem

logger = logging.getLogger(__name__)

VALID_ROLES = {"user", "assistant"}


def list_wardrobe(db: Session) -> list[WardrobeItem]:
    return db.query(WardrobeItem).order_by(WardrobeItem.created_at.desc(), WardrobeItem.id.desc()).all()


def insert_wardrobe_item(
    db: Session,
    image_data: str | None,
    analysis: dict[str, Any],
    recommendations: list[dict[str, Any]],
) -> int:
    item = WardrobeItem(image_data=image_data, analysis=analysis, recommendations=recommendations)
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("wardrobe_item_created id=%s recommendations=%d", item.id, len(recommendations))
    return item.id


def list_chat_history(db: Session) -> list[ChatMessage]:
    return db.query(ChatMessage).order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc()).all()


def append_chat_message(db: Session, role: str, content: str) -> ChatMessage:
    role = "assistant" if role == "model" else role
    if role not in VALID_ROLES:
        raise ValueError(f"unknown chat role: {role!r}")
    row = ChatMessage(role=role, content=content or "")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def record_chat_exchange(session_factory: Callable[[], Session], user_text: str, assistant_text: str) -> None:
    """Fire-and-forget persistence of one chat exchange; failures are logged, never raised."""
    db = session_factory()
    try:
        append_chat_message(db, "user", user_text)
        append_chat_message(db, "assistant", assistant_text)
    except Exception:
        db.rollback()
        logger.exception("chat_history_persist_failed")
    finally:
        db.close()
