import json

import httpx

from glamflow.constants import DEFAULT_SERVICES
from glamflow.services.concierge_service import (
    ANALYSIS_FALLBACK,
    CONSULTATION_FALLBACK,
    DEFAULT_FALLBACK,
    ConciergeService,
)

from .conftest import make_appointment


def gemini_reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def service_with(handler) -> ConciergeService:
    return ConciergeService(
        api_key="test-key", model="gemini-test", transport=httpx.MockTransport(handler)
    )


async def test_returns_generated_text():
    requests = []

    def handler(request: httpx.Request):
        requests.append(request)
        return httpx.Response(200, json=gemini_reply("  Salamat po! See you soon.  "))

    text = await service_with(handler).generate("hello")

    assert text == "Salamat po! See you soon."
    assert requests[0].url.path.endswith("/gemini-test:generateContent")
    assert requests[0].url.params["key"] == "test-key"


async def test_image_is_sent_inline():
    bodies = []

    def handler(request: httpx.Request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=gemini_reply("Try the Balayage."))

    text = await service_with(handler).analyze_look("aGVsbG8=", DEFAULT_SERVICES)

    parts = bodies[0]["contents"][0]["parts"]
    assert parts[1] == {"inline_data": {"mime_type": "image/jpeg", "data": "aGVsbG8="}}
    assert "Signature Haircut" in parts[0]["text"]
    assert text == "Try the Balayage."


async def test_http_error_falls_back():
    service = service_with(lambda request: httpx.Response(500, json={"error": "boom"}))

    assert await service.consultation("I feel stressed", DEFAULT_SERVICES) == CONSULTATION_FALLBACK


async def test_network_error_falls_back():
    def handler(request):
        raise httpx.ConnectError("no route to host")

    assert await service_with(handler).analyze_look("aGVsbG8=", []) == ANALYSIS_FALLBACK


async def test_malformed_payload_falls_back():
    service = service_with(lambda request: httpx.Response(200, json={"candidates": []}))

    assert await service.generate("hello") == DEFAULT_FALLBACK


async def test_missing_key_never_calls_out():
    def handler(request):
        raise AssertionError("should not be called")

    service = ConciergeService(api_key=None, transport=httpx.MockTransport(handler))
    appointment = make_appointment()

    message = await service.booking_confirmation(appointment, "Signature Haircut", "Maria Santos")

    assert message == (
        "Booking confirmed! We are excited to see you on 2025-03-10 for your Signature Haircut."
    )
