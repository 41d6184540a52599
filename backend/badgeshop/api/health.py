from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from badgeshop.config import settings
from badgeshop.db import barcode_engine, engine
from badgeshop.utils.log import get_logger

router = APIRouter()
log = get_logger("health")


def _ping(eng) -> bool:
    try:
        with eng.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        log.error(f"Database ping failed for {eng.url.render_as_string(hide_password=True)}: {e}")
        return False


@router.get("/health", tags=["health"])
def health():
    db_ok = _ping(engine)
    barcode_ok = _ping(barcode_engine)
    anthropic_ok = bool(settings.ANTHROPIC_API_KEY)
    openai_ok = bool(settings.OPENAI_API_KEY)
    return {
        "status": "ok" if db_ok and barcode_ok else "degraded",
        "db": db_ok,
        "barcode_db": barcode_ok,
        "anthropic_configured": anthropic_ok,
        "openai_configured": openai_ok,
    }
