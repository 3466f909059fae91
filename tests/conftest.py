"""
Shared fixtures: a small digit image, a clean config, and service clients
backed by httpx.MockTransport instead of a real generation service.
"""

import base64
import json
import sys
from io import BytesIO
from pathlib import Path

import httpx
import pytest
from PIL import Image, ImageDraw

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from adv_client.config import BACKEND_ENV_VAR, Config
from adv_client.transport import ServiceClient

SERVICE_URL = "http://fgsm.test"


def png_bytes(size=(28, 28)) -> bytes:
    """A white-on-black stroke, roughly an MNIST '1'."""
    img = Image.new("L", size, color=0)
    ImageDraw.Draw(img).line([(14, 4), (14, 23)], fill=255, width=3)
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def json_response(payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode(),
                          headers={"content-type": "application/json"})


def adversarial_payload(original="7", adversarial="1", image=None) -> dict:
    return {
        "adversarial_image": image or base64.b64encode(png_bytes()).decode(),
        "predictions": {"original": original, "adversarial": adversarial},
    }


@pytest.fixture
def digit_png() -> bytes:
    return png_bytes()


@pytest.fixture
def digit_file(tmp_path, digit_png) -> Path:
    path = tmp_path / "digit_7.png"
    path.write_bytes(digit_png)
    return path


@pytest.fixture
def config(monkeypatch) -> Config:
    monkeypatch.delenv(BACKEND_ENV_VAR, raising=False)
    config = Config()
    config.service["base_url"] = SERVICE_URL
    return config


@pytest.fixture
def make_client(config):
    """Build a ServiceClient whose requests are answered by `handler`."""
    def factory(handler) -> ServiceClient:
        return ServiceClient(transport=httpx.MockTransport(handler), config=config)
    return factory
