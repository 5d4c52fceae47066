from __future__ import annotations

from fastapi import APIRouter

from lumiere.api.v1.endpoints import chat
from lumiere.api.v1.endpoints import styling
from lumiere.api.v1.endpoints import wardrobe

api_router = APIRouter(prefix="/api")
api_router.include_router(wardrobe.router, tags=["wardrobe"])
api_router.include_router(chat.router, tags=["chat"])
api_router.include_router(styling.router, prefix="/styling", tags=["styling"])
