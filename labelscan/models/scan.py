"""Scan submission and history data models."""

import base64
import time
import uuid

from pydantic import BaseModel, Field

from labelscan.models.analysis import AnalysisRecord


class ImagePart(BaseModel):
    """An image ready to be inlined into the model request."""

    data: bytes
    media_type: str = Field(default="image/jpeg", description="MIME type, e.g. 'image/png'")

    @property
    def size(self) -> int:
        return len(self.data)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        """Encode as a data URL, the image reference stored with each scan."""
        return f"data:{self.media_type};base64,{self.to_base64()}"


class ScanResult(AnalysisRecord):
    """An analysis record with identity, time and the image it describes."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: int = Field(
        default_factory=lambda: int(time.time() * 1000),
        description="Epoch milliseconds",
    )
    image_url: str = Field(description="Data URL of the scanned image")

    @classmethod
    def from_record(cls, record: AnalysisRecord, image: ImagePart) -> "ScanResult":
        return cls(**record.model_dump(), image_url=image.to_data_url())
