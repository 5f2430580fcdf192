from __future__ import annotations

import logging
from typing import Any

import httpx

from mockprep.application.dto.slot_payload import extract_slot_id, normalize_slot, normalize_slot_list
from mockprep.application.exceptions import SchedulingApiError
from mockprep.application.ports.scheduling_api import SchedulingApiPort
from mockprep.core.config import settings
from mockprep.domain.entities.interview_slot import InterviewSlot, SlotStatus
from mockprep.domain.entities.session import SessionContext


class HttpSchedulingApi(SchedulingApiPort):
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.SCHEDULING_API_BASE_URL or "").rstrip("/")
        if not self._base_url:
            raise ValueError("SCHEDULING_API_BASE_URL is required for the HTTP scheduling client")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout or settings.SCHEDULING_API_TIMEOUT_SECONDS,
            transport=transport,
        )
        self._logger = logging.getLogger(__name__)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create_slot(self, session: SessionContext, payload: dict[str, Any]) -> str:
        body = dict(payload)
        mode = str(body.pop("mode", "ONLINE")).lower()
        data = await self._request(
            "POST",
            self._slots_path(session),
            session,
            params={"mode": mode},
            json=body,
        )
        slot_id = extract_slot_id(data)
        if not slot_id:
            raise SchedulingApiError("No slot id returned from Scheduling API")

        self._logger.info("Interview slot created", extra={"user_id": session.user_id, "slot_id": slot_id})
        return slot_id

    async def confirm_payment(self, session: SessionContext, slot_id: str, amount: str | None = None) -> None:
        body = {"amount": amount} if amount else {}
        await self._request("PUT", f"{self._slots_path(session)}/{slot_id}", session, json=body)
        self._logger.info("Interview slot payment confirmed", extra={"user_id": session.user_id, "slot_id": slot_id})

    async def update_slot_status(self, session: SessionContext, slot_id: str, status: SlotStatus) -> None:
        await self._request(
            "PATCH",
            f"{self._slots_path(session)}/{slot_id}",
            session,
            json={"status": status.value},
        )
        self._logger.info(
            "Interview slot status updated",
            extra={"user_id": session.user_id, "slot_id": slot_id, "status": status.value},
        )

    async def get_slots_by_user(self, session: SessionContext) -> list[InterviewSlot]:
        data = await self._request("GET", self._slots_path(session), session)
        return normalize_slot_list(data)

    async def get_slot_by_id(self, session: SessionContext, slot_id: str) -> InterviewSlot:
        data = await self._request("GET", f"{self._slots_path(session)}/{slot_id}", session)
        if not isinstance(data, dict):
            raise SchedulingApiError("Unexpected slot payload from Scheduling API")
        return normalize_slot(data)

    def _slots_path(self, session: SessionContext) -> str:
        return f"/users/{session.user_id}/mock-interview/interview-slot"

    async def _request(
        self,
        method: str,
        path: str,
        session: SessionContext,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        try:
            resp = await self._client.request(method, path, params=params, json=json, headers=session.auth_header)
        except httpx.HTTPError as e:
            self._logger.error("Scheduling API unreachable", extra={"error": str(e), "user_id": session.user_id})
            raise SchedulingApiError(f"Network error: {e}") from e

        if resp.status_code >= 400:
            message, code = _error_details(resp)
            self._logger.error(
                "Scheduling API request failed",
                extra={"status": resp.status_code, "error": message, "reason": code, "user_id": session.user_id},
            )
            raise SchedulingApiError(message, status_code=resp.status_code, error_code=code)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise SchedulingApiError("Invalid JSON from Scheduling API", status_code=resp.status_code) from e


def _error_details(resp: httpx.Response) -> tuple[str | None, str | None]:
    try:
        body = resp.json()
    except ValueError:
        return (resp.text or None), None

    if not isinstance(body, dict):
        return None, None

    error = body.get("error")
    if isinstance(error, dict):
        message = error.get("message") or body.get("detail") or body.get("message")
        code = error.get("code") or body.get("error_code")
    else:
        message = body.get("detail") or body.get("message") or error
        code = body.get("error_code") or body.get("code")

    return (str(message) if message else None), (str(code) if code else None)
