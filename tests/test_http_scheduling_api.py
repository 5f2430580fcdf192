from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from mockprep.application.exceptions import ConflictError, SchedulingApiError
from mockprep.application.utils.error_mapping import map_scheduling_error
from mockprep.core.config import settings
from mockprep.domain.entities.interview_slot import SlotStatus
from mockprep.domain.entities.session import SessionContext
from mockprep.infrastructure.scheduling.http_scheduling_api import HttpSchedulingApi

BASE_URL = "https://scheduling.test/api"
SESSION = SessionContext(user_id="42", token="secret-token")
SLOTS_PATH = "/api/users/42/mock-interview/interview-slot"


def _run(handler, call):
    async def scenario():
        api = HttpSchedulingApi(base_url=BASE_URL, timeout=5, transport=httpx.MockTransport(handler))
        try:
            return await call(api)
        finally:
            await api.aclose()

    return asyncio.run(scenario())


def test_create_slot_posts_payload_with_mode_query():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"interview_slot": {"id": "x"}, "interview_slot_id": "slot_9"})

    payload = {"job_role": "Backend Engineer", "date": "2026-10-20", "time": "10:00", "mode": "ONLINE"}
    slot_id = _run(handler, lambda api: api.create_slot(SESSION, payload))

    assert slot_id == "slot_9"
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == SLOTS_PATH
    assert request.url.params["mode"] == "online"
    assert request.headers["Authorization"] == "Bearer secret-token"
    assert json.loads(request.content) == {"job_role": "Backend Engineer", "date": "2026-10-20", "time": "10:00"}
    # caller's payload is left untouched
    assert payload["mode"] == "ONLINE"


def test_create_slot_without_id_fails():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": True})

    with pytest.raises(SchedulingApiError):
        _run(handler, lambda api: api.create_slot(SESSION, {"mode": "ONLINE"}))


def test_confirm_payment_sends_amount():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True})

    _run(handler, lambda api: api.confirm_payment(SESSION, "slot_9", "399.00"))

    assert seen[0].method == "PUT"
    assert seen[0].url.path == f"{SLOTS_PATH}/slot_9"
    assert json.loads(seen[0].content) == {"amount": "399.00"}


def test_update_status_patches_slot():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    _run(handler, lambda api: api.update_slot_status(SESSION, "slot_9", SlotStatus.cancelled))

    assert seen[0].method == "PATCH"
    assert json.loads(seen[0].content) == {"status": "cancelled"}


def test_list_and_get_are_normalized():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == SLOTS_PATH:
            return httpx.Response(
                200,
                json={"slots": [{"interview_slot_id": "a", "interview_status": "waiting", "is_payment_done": True}]},
            )
        return httpx.Response(200, json={"interview_slot": {"slotId": "b", "start_time": "2026-10-20T04:30:00Z"}})

    slots = _run(handler, lambda api: api.get_slots_by_user(SESSION))
    assert [(s.id, s.status, s.payment_done) for s in slots] == [("a", SlotStatus.waiting, True)]

    slot = _run(handler, lambda api: api.get_slot_by_id(SESSION, "b"))
    assert slot.id == "b"
    assert slot.start_utc is not None


def test_error_body_is_surfaced():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"detail": "Interview slot alredy booked"})

    with pytest.raises(SchedulingApiError) as exc:
        _run(handler, lambda api: api.create_slot(SESSION, {"mode": "ONLINE"}))

    assert exc.value.status_code == 400
    assert exc.value.message == "Interview slot alredy booked"
    assert isinstance(map_scheduling_error(exc.value), ConflictError)


def test_structured_error_code_is_read():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"error": {"code": "SLOT_CONFLICT", "message": "Taken"}})

    with pytest.raises(SchedulingApiError) as exc:
        _run(handler, lambda api: api.create_slot(SESSION, {"mode": "ONLINE"}))

    assert exc.value.error_code == "SLOT_CONFLICT"
    assert exc.value.message == "Taken"


def test_plain_text_error_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad gateway")

    with pytest.raises(SchedulingApiError) as exc:
        _run(handler, lambda api: api.get_slots_by_user(SESSION))

    assert exc.value.status_code == 502
    assert exc.value.message == "Bad gateway"


def test_network_failure_is_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(SchedulingApiError) as exc:
        _run(handler, lambda api: api.get_slots_by_user(SESSION))

    assert exc.value.status_code is None
    assert str(exc.value).startswith("Network error")


def test_base_url_is_required(monkeypatch):
    monkeypatch.setattr(settings, "SCHEDULING_API_BASE_URL", None)
    with pytest.raises(ValueError):
        HttpSchedulingApi()
