import io
import json

import pytest
from PIL import Image

from labelscan.config import Settings
from labelscan.models.scan import ImagePart


class StubModel:
    """AnalysisModel that answers from a function and counts calls."""

    def __init__(self, respond):
        self.respond = respond
        self.calls = 0
        self.requests = []

    def generate(self, request):
        self.calls += 1
        self.requests.append(request)
        return self.respond(request)


def make_image(fmt: str = "PNG", color: str = "red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color).save(buffer, format=fmt)
    return buffer.getvalue()


def results_json(results) -> str:
    return json.dumps({"results": results})


def echo_results(request) -> str:
    """One result per image whose verdict names the image's position."""
    return results_json(
        [
            {
                "category": "Food",
                "risk_level": "Safe",
                "verdict": f"item-{i}",
                "reasoning": f"image {i}",
                "ingredients": [],
            }
            for i in range(len(request.images))
        ]
    )


@pytest.fixture
def settings(tmp_path):
    return Settings(
        anthropic_api_key="test-key",
        history_db_path=str(tmp_path / "history.db"),
        _env_file=None,
    )


@pytest.fixture
def png_bytes():
    return make_image("PNG")


@pytest.fixture
def jpeg_bytes():
    return make_image("JPEG", "blue")


@pytest.fixture
def image_parts():
    def build(count: int):
        return [ImagePart(data=make_image("PNG"), media_type="image/png") for _ in range(count)]

    return build
