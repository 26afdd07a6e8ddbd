"""Batch submission adapter: turns client images into inline model parts."""

import base64
import binascii
import io
import re
from typing import Sequence, Union

from PIL import Image, UnidentifiedImageError

from labelscan.config import Settings
from labelscan.exceptions import EmptyBatch, InvalidImage, PayloadTooLarge
from labelscan.logger import get_logger
from labelscan.models.scan import ImagePart

logger = get_logger(__name__)

DEFAULT_MEDIA_TYPE = "image/jpeg"

DATA_URL_PATTERN = re.compile(r"^data:(?P<media_type>image/[\w.+-]+);base64,", re.IGNORECASE)

RawImage = Union[bytes, str]


def detect_media_type(data: bytes) -> str:
    """Sniff the MIME type of raw image bytes, defaulting to JPEG."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            media_type = Image.MIME.get(img.format or "")
    except (UnidentifiedImageError, OSError):
        media_type = None

    if not media_type:
        logger.warning(
            f"Could not identify image format ({len(data)} bytes), assuming {DEFAULT_MEDIA_TYPE}"
        )
        return DEFAULT_MEDIA_TYPE
    return media_type


def decode_image(image: RawImage) -> ImagePart:
    """Convert one submitted image into an ImagePart.

    Strings are treated as base64, optionally carrying a data URL prefix
    (what the camera UI produces). Bytes are used as-is.
    """
    if isinstance(image, (bytes, bytearray)):
        data = bytes(image)
        return ImagePart(data=data, media_type=detect_media_type(data))

    text = image.strip()
    media_type = None
    match = DATA_URL_PATTERN.match(text)
    if match:
        media_type = match.group("media_type").lower()
        if media_type == "image/jpg":
            media_type = DEFAULT_MEDIA_TYPE
        text = text[match.end():]

    try:
        data = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImage(f"Image is not valid base64: {e}") from e

    if not data:
        raise InvalidImage("Image is empty")

    return ImagePart(data=data, media_type=media_type or detect_media_type(data))


class SubmissionAdapter:
    """Validates a batch of images and encodes it for the analysis model."""

    def __init__(self, settings: Settings):
        self.max_batch_size = settings.max_batch_size
        self.max_image_bytes = settings.max_image_bytes
        self.max_total_bytes = settings.max_total_bytes
        logger.debug(
            f"SubmissionAdapter initialized (max_batch_size={self.max_batch_size}, "
            f"max_image_bytes={self.max_image_bytes}, max_total_bytes={self.max_total_bytes})"
        )

    def prepare(self, images: Sequence[RawImage]) -> list[ImagePart]:
        """Decode and validate an ordered batch of images.

        Raises:
            EmptyBatch: no images were given
            PayloadTooLarge: too many images, or an image / the batch is too big
            InvalidImage: an image string is not valid base64
        """
        if not images:
            raise EmptyBatch()

        if len(images) > self.max_batch_size:
            raise PayloadTooLarge(
                f"Too many images: {len(images)} submitted, at most {self.max_batch_size} allowed"
            )

        parts = []
        total = 0
        for i, image in enumerate(images, 1):
            part = decode_image(image)
            if part.size > self.max_image_bytes:
                raise PayloadTooLarge(
                    f"Image {i} is {part.size} bytes, limit is {self.max_image_bytes}"
                )
            total += part.size
            if total > self.max_total_bytes:
                raise PayloadTooLarge(
                    f"Batch exceeds {self.max_total_bytes} bytes at image {i}"
                )
            parts.append(part)
            logger.debug(f"Image {i}/{len(images)}: {part.media_type}, {part.size} bytes")

        logger.info(f"Prepared batch of {len(parts)} images ({total} bytes)")
        return parts
