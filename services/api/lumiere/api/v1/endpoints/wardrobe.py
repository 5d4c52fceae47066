from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lumiere.api.deps import get_db
from lumiere.schemas.wardrobe import WardrobeCreate, WardrobeCreated, WardrobeEntryOut
from lumiere.services.wardrobe import insert_wardrobe_item, list_wardrobe

router = APIRouter()


@router.get("/wardrobe", response_model=list[WardrobeEntryOut])
def get_wardrobe(db: Session = Depends(get_db)) -> list[WardrobeEntryOut]:
    return [
        WardrobeEntryOut(
            id=r.id,
            image_data=r.image_data,
            analysis=r.analysis or {},
            recommendations=r.recommendations or [],
            created_at=r.created_at,
        )
        for r in list_wardrobe(db)
    ]


@router.post("/wardrobe", response_model=WardrobeCreated)
def add_wardrobe_item(payload: WardrobeCreate, db: Session = Depends(get_db)) -> WardrobeCreated:
    item_id = insert_wardrobe_item(
        db,
        image_data=payload.image_data,
        analysis=payload.analysis,
        recommendations=payload.recommendations,
    )
    return WardrobeCreated(id=item_id)
