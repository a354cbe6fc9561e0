from __future__ import annotations

from functools import lru_cache
from typing import Generator

from loudstock.app.core.config import settings
from loudstock.app.db.session import SessionLocal
from loudstock.services.carrier import YalidineClient


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache()
def get_carrier() -> YalidineClient:
    # un seul client : throttling et quotas partagés
    return YalidineClient.from_settings(settings)
