"""API request models."""

from pydantic import BaseModel, Field


class Base64ScanRequest(BaseModel):
    """Request model for scanning images sent as data URLs or base64 strings."""

    images: list[str] = Field(
        ..., description="Images as 'data:image/...;base64,' URLs or bare base64, in order"
    )
