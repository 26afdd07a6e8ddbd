"""Exceptions raised by LabelScan services."""


class LabelScanError(Exception):
    """Base class for LabelScan errors."""


class EmptyBatch(LabelScanError, ValueError):
    """No images were submitted."""

    def __init__(self, message: str = "At least one image is required"):
        super().__init__(message)


class PayloadTooLarge(LabelScanError, ValueError):
    """An image, the whole batch, or the image count exceeds the configured limit."""


class InvalidImage(LabelScanError, ValueError):
    """An image could not be decoded."""


class AnalysisModelError(LabelScanError):
    """The AI model call failed or returned a non-success response."""


class MalformedResponse(LabelScanError):
    """The AI model returned no text, invalid JSON, or no results array."""
