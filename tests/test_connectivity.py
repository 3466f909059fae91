"""
Module: tests.test_connectivity
Purpose: Liveness probing, failure absorption and stale-probe handling
"""

import asyncio

import httpx
import pytest

from conftest import adversarial_payload, json_response
from adv_client.ingest import ImageIngestor
from adv_client.connectivity import ConnectivityMonitor
from adv_client.models.entities import ConnectivityStatus, StatusKind
from adv_client.orchestrator import GenerationOrchestrator


def test_initial_status_is_unknown(make_client):
    monitor = ConnectivityMonitor(make_client(lambda request: json_response({})))

    assert monitor.status == ConnectivityStatus.unknown()
    assert monitor.status.display == "Checking..."


def test_probe_uses_message_from_body(make_client):
    seen = []

    def handler(request):
        seen.append((request.method, request.url.path))
        return json_response({"message": "FGSM API is running"})

    monitor = ConnectivityMonitor(make_client(handler))
    status = asyncio.run(monitor.probe())

    assert seen == [("GET", "/")]
    assert status == ConnectivityStatus.connected("FGSM API is running")
    assert monitor.status.display == "Connected: FGSM API is running"


def test_probe_without_message_uses_generic_acknowledgement(make_client):
    monitor = ConnectivityMonitor(make_client(lambda request: json_response({"version": "1.0"})))

    status = asyncio.run(monitor.probe())

    assert status.is_connected
    assert status.message == "Backend OK"


def test_probe_non_success_status_is_disconnected(make_client):
    monitor = ConnectivityMonitor(make_client(lambda request: json_response({"message": "down"}, 503)))

    assert asyncio.run(monitor.probe()).kind is StatusKind.DISCONNECTED


def test_probe_non_json_body_is_disconnected(make_client):
    monitor = ConnectivityMonitor(make_client(lambda request: httpx.Response(200, content=b"<html></html>")))

    assert asyncio.run(monitor.probe()).kind is StatusKind.DISCONNECTED


@pytest.mark.parametrize("body", [b"null", b"[1, 2]", b'"hi"', b"42"])
def test_liveness_json_that_is_not_an_object_is_disconnected(make_client, body):
    monitor = ConnectivityMonitor(make_client(lambda request: httpx.Response(200, content=body)))

    assert asyncio.run(monitor.probe()).kind is StatusKind.DISCONNECTED


def test_liveness_undecodable_content_encoding_is_disconnected(make_client):
    def handler(request):
        return httpx.Response(
            200,
            headers={"content-encoding": "gzip"},
            stream=httpx.ByteStream(b"definitely not gzip"),
        )

    monitor = ConnectivityMonitor(make_client(handler))
    status = asyncio.run(monitor.probe())

    assert status == ConnectivityStatus.disconnected()
    assert monitor.status == ConnectivityStatus.disconnected()


def test_transport_failure_overrides_previous_connected(make_client):
    responses = [json_response({"message": "hello"})]

    def handler(request):
        if responses:
            return responses.pop(0)
        raise httpx.ConnectError("Connection refused")

    monitor = ConnectivityMonitor(make_client(handler))

    assert asyncio.run(monitor.probe()).is_connected
    status = asyncio.run(monitor.probe())

    assert status == ConnectivityStatus.disconnected()
    assert monitor.status == ConnectivityStatus.disconnected()
    assert monitor.status.display == "Disconnected - Start backend server"


def test_stale_probe_does_not_overwrite_newer_status(make_client):
    """The first probe answers last; the second probe's status must survive."""
    async def scenario():
        release_first = asyncio.Event()
        calls = []

        async def handler(request):
            calls.append(request)
            if len(calls) == 1:
                await release_first.wait()
                return json_response({"message": "slow but alive"})
            return json_response({}, status_code=500)

        monitor = ConnectivityMonitor(make_client(handler))
        first = asyncio.create_task(monitor.probe())
        while not calls:
            await asyncio.sleep(0)

        second = await monitor.probe()
        release_first.set()
        stale = await first
        return monitor, stale, second

    monitor, stale, second = asyncio.run(scenario())

    assert stale.is_connected
    assert second.kind is StatusKind.DISCONNECTED
    assert monitor.status.kind is StatusKind.DISCONNECTED


def test_probe_runs_while_generation_in_flight(make_client, digit_png):
    """Probing is neither blocked by nor blocking the orchestrator."""
    async def scenario():
        release = asyncio.Event()

        async def handler(request):
            if request.url.path == "/generate-adversarial/":
                await release.wait()
                return json_response(adversarial_payload())
            return json_response({"message": "up"})

        client = make_client(handler)
        monitor = ConnectivityMonitor(client)
        orchestrator = GenerationOrchestrator(client)
        image = ImageIngestor().ingest(digit_png)

        generation = asyncio.create_task(orchestrator.generate(image, 0.1))
        await asyncio.sleep(0)
        status = await monitor.probe()
        still_in_flight = orchestrator.in_flight

        release.set()
        await generation
        return status, still_in_flight, orchestrator

    status, still_in_flight, orchestrator = asyncio.run(scenario())

    assert status.is_connected
    assert still_in_flight
    assert orchestrator.result is not None
