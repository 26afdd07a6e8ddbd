"""API response models."""

from pydantic import BaseModel, Field
from typing import List

from labelscan.models.scan import ScanResult


class HistoryResponse(BaseModel):
    """Response model for the scan history listing."""

    scans: List[ScanResult] = Field(..., description="Stored scans, most recent first")
    total_count: int = Field(..., description="Number of scans returned")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(default="1.0.0", description="API version")
