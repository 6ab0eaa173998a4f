from fastapi import APIRouter, Depends

from itinerary_ace.core.config import Settings
from itinerary_ace.db.dal import Database
from itinerary_ace.db.migrate import CURRENT_SCHEMA_VERSION
from itinerary_ace.services.rates.rate_store import get_last_fetched
from .deps import get_app_settings, get_db

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness and storage check")
async def health(
    settings: Settings = Depends(get_app_settings), db: Database = Depends(get_db)
):
    last_fetched = get_last_fetched(db)
    return {
        "status": "ok",
        "version": settings.version,
        "schema_version": CURRENT_SCHEMA_VERSION,
        "stored_keys": len(db.keys()),
        "rates_last_fetched": last_fetched.isoformat() if last_fetched else None,
    }
