from fastapi import Depends, HTTPException, Query
from sqlalchemy.orm import Session

from .config import settings
from .database import get_db
from .services.slots import SlotsDbStore
from .services.slots.timezones import is_plausible_timezone


def get_store(db: Session = Depends(get_db)) -> SlotsDbStore:
    return SlotsDbStore(db)


def requested_timezone(
    timezone: str = Query(settings.default_timezone, max_length=64),
) -> str:
    """Reject obviously malformed zones; unknown-but-plausible ones degrade at render time."""
    if not is_plausible_timezone(timezone):
        raise HTTPException(status_code=400, detail=f"Invalid timezone {timezone!r}")
    return timezone
