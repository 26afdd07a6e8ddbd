"""Scan history endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from labelscan.api.schemas.response import HistoryResponse
from labelscan.config import Settings, get_settings
from labelscan.logger import get_logger
from labelscan.models.scan import ScanResult
from labelscan.services.history import HistoryStore, SQLiteHistoryStore

logger = get_logger(__name__)
router = APIRouter()


def get_history_store(settings: Settings = Depends(get_settings)) -> HistoryStore:
    """Dependency to get the history store. Does not need an AI provider key."""
    return SQLiteHistoryStore(
        settings.history_db_path,
        key=settings.history_key,
        max_entries=settings.history_limit,
    )


@router.get("", response_model=HistoryResponse)
async def list_history(
    limit: Optional[int] = Query(default=None, ge=1),
    store: HistoryStore = Depends(get_history_store),
):
    """List stored scans, most recent first."""
    scans = store.list(limit)
    return HistoryResponse(scans=scans, total_count=len(scans))


@router.get("/{scan_id}", response_model=ScanResult)
async def get_scan(scan_id: str, store: HistoryStore = Depends(get_history_store)):
    """Get a single stored scan by ID."""
    scan = store.get_by_id(scan_id)
    if scan is None:
        raise HTTPException(status_code=404, detail=f"Scan {scan_id} not found")
    return scan


@router.delete("")
async def clear_history(store: HistoryStore = Depends(get_history_store)):
    """Delete every stored scan."""
    try:
        store.clear()
        logger.info("History cleared")
        return {"status": "success", "message": "History cleared"}

    except Exception as e:
        logger.error(f"Error clearing history: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to clear history: {str(e)}")
