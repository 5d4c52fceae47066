from __future__ import annotations

from typing import Callable

from fastapi import Depends
from sqlalchemy.orm import Session

from lumiere.db.session import SessionLocal, get_db_session
from lumiere.services.gateway import GeminiGateway, StylingGateway
from lumiere.services.stylist import StylistPipeline


def get_db() -> Session:
    yield from get_db_session()


def get_session_factory() -> Callable[[], Session]:
    return SessionLocal


def get_gateway() -> StylingGateway:
    return GeminiGateway()


def get_stylist(gateway: StylingGateway = Depends(get_gateway)) -> StylistPipeline:
    return StylistPipeline(gateway)
