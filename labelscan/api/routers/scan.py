"""Image scanning endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from labelscan.api.routers.history import get_history_store
from labelscan.api.schemas.request import Base64ScanRequest
from labelscan.api.services.scan_service import ScanService
from labelscan.config import Settings, get_settings
from labelscan.exceptions import PayloadTooLarge
from labelscan.logger import get_logger
from labelscan.models.scan import ScanResult
from labelscan.services.history import HistoryStore
from labelscan.services.submission import RawImage

logger = get_logger(__name__)
router = APIRouter()


def get_scan_service(
    settings: Settings = Depends(get_settings),
    history: HistoryStore = Depends(get_history_store),
) -> ScanService:
    """Dependency to get ScanService instance."""
    return ScanService(settings, history=history)


def _run_scan(service: ScanService, images: List[RawImage]) -> List[ScanResult]:
    try:
        logger.info(f"Received scan request with {len(images)} images")
        results = service.scan(images)
        logger.info("Scan request completed successfully")
        return results

    except PayloadTooLarge as e:
        logger.error(f"Payload too large: {e}")
        raise HTTPException(status_code=413, detail=str(e))
    except ValueError as e:
        logger.error(f"Validation error: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error scanning images: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Scan failed: {str(e)}")


@router.post("", response_model=List[ScanResult])
async def scan_images(
    images: Optional[List[UploadFile]] = File(None),
    service: ScanService = Depends(get_scan_service),
):
    """
    Analyze a batch of uploaded images.

    - **images**: one or more image files, returned results are in the same order
    """
    raw_images = [await image.read() for image in images or []]
    return _run_scan(service, raw_images)


@router.post("/base64", response_model=List[ScanResult])
async def scan_base64_images(
    request: Base64ScanRequest,
    service: ScanService = Depends(get_scan_service),
):
    """
    Analyze a batch of images captured by the camera UI.

    - **images**: data URLs (or bare base64), results are in the same order
    """
    return _run_scan(service, list(request.images))
