from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lumiere.api.deps import get_db
from lumiere.schemas.chat import ChatAppended, ChatMessageIn, ChatMessageOut
from lumiere.services.wardrobe import append_chat_message, list_chat_history

router = APIRouter()


@router.get("/chat", response_model=list[ChatMessageOut])
def get_chat_history(db: Session = Depends(get_db)) -> list[ChatMessageOut]:
    return [
        ChatMessageOut(id=r.id, role=r.role, content=r.content, created_at=r.created_at)
        for r in list_chat_history(db)
    ]


@router.post("/chat", response_model=ChatAppended)
def add_chat_message(payload: ChatMessageIn, db: Session = Depends(get_db)) -> ChatAppended:
    append_chat_message(db, payload.role, payload.content)
    return ChatAppended()
