"""
Module: tests.test_session
Purpose: Composition root wiring, explicit initialization and state snapshots
"""

import asyncio

import pytest

from conftest import adversarial_payload, json_response
from adv_client.core import AdversarialSession
from adv_client.errors import PreconditionError


class FakeService:
    """Answers both endpoints of the generation service and records calls."""

    def __init__(self, root_status=200):
        self.root_status = root_status
        self.calls = []

    def __call__(self, request):
        self.calls.append(request.url.path)
        if request.url.path == "/":
            return json_response({"message": "FGSM API ready"}, self.root_status)
        return json_response(adversarial_payload("7", "1", image="QUJD"))


def test_construction_does_not_touch_the_network(make_client, config):
    service = FakeService()
    session = AdversarialSession(client=make_client(service), config=config)

    assert service.calls == []
    assert not session.initialized
    assert session.snapshot()["backend"]["status"] == "unknown"


def test_initialize_probes_once(make_client, config):
    service = FakeService()
    session = AdversarialSession(client=make_client(service), config=config)

    status = asyncio.run(session.initialize())
    again = asyncio.run(session.initialize())

    assert status.is_connected
    assert again == status
    assert service.calls == ["/"]

    asyncio.run(session.check_backend())
    assert service.calls == ["/", "/"]


def test_generate_uses_current_image_and_strength(make_client, config, digit_png):
    bodies = []

    async def handler(request):
        if request.url.path == "/":
            return json_response({})
        bodies.append(await request.aread())
        return json_response(adversarial_payload("7", "1"))

    session = AdversarialSession(client=make_client(handler), config=config)
    session.ingestor.ingest(digit_png, filename="seven.png")
    session.parameters.set_strength(0.333)

    result = asyncio.run(session.generate())

    assert result.original_label == "7"
    assert b"0.33" in bodies[0]
    assert b'filename="seven.png"' in bodies[0]


def test_generate_without_image(make_client, config):
    service = FakeService()
    session = AdversarialSession(client=make_client(service), config=config)

    with pytest.raises(PreconditionError):
        asyncio.run(session.generate())
    assert service.calls == []


def test_disconnected_status_does_not_block_generation(make_client, config, digit_png):
    service = FakeService(root_status=502)
    session = AdversarialSession(client=make_client(service), config=config)
    session.ingestor.ingest(digit_png)

    status = asyncio.run(session.initialize())
    result = asyncio.run(session.generate())

    assert not status.is_connected
    assert result.adversarial_label == "1"


def test_snapshot_reflects_all_components(make_client, config, digit_png):
    session = AdversarialSession(client=make_client(FakeService()), config=config)
    asyncio.run(session.initialize())
    session.ingestor.ingest(digit_png, filename="seven.png")
    session.parameters.set_strength(0.2)
    asyncio.run(session.generate())

    snapshot = session.snapshot()

    assert snapshot["backend"] == {
        "url": "http://fgsm.test",
        "status": "connected",
        "message": "FGSM API ready",
        "display": "Connected: FGSM API ready",
    }
    assert snapshot["strength"]["value"] == 0.2
    assert snapshot["image"]["filename"] == "seven.png"
    assert snapshot["image"]["preview"].startswith("data:image/png;base64,")
    assert snapshot["request"] == {"phase": "succeeded", "reason": None, "loading": False}
    assert snapshot["result"] == {
        "original_label": "7",
        "adversarial_label": "1",
        "adversarial_image": "data:image/png;base64,QUJD",
    }
