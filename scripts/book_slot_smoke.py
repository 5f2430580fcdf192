#!/usr/bin/env python3
from __future__ import annotations

import argparse
from datetime import date, timedelta
from typing import Any

import httpx
from httpx import ConnectError


def build_booking(role: str, day: date, time_label: str, skills: list[str]) -> dict[str, Any]:
    return {
        "role": role,
        "date": day.isoformat(),
        "time": time_label,
        "skills": skills,
        "years": [1, 2],
        "months": [1, 2, 3],
        "resume": "DEFAULT_RESUME_0",
        "mode": "ONLINE",
    }


def show(label: str, resp: httpx.Response) -> None:
    print(f"{label}: {resp.status_code}")
    if resp.text:
        print(resp.text)


def main() -> None:
    parser = argparse.ArgumentParser(description="Book, pay for and cancel one mock interview slot")
    parser.add_argument("--url", default="http://127.0.0.1:8001/api/v1")
    parser.add_argument("--user", default="user_123")
    parser.add_argument("--token", default="dev-token")
    parser.add_argument("--role", default="Backend Engineer")
    parser.add_argument("--days-ahead", type=int, default=1)
    parser.add_argument("--time", default="10:00 AM")
    parser.add_argument("--skill", action="append", dest="skills", default=None)
    parser.add_argument("--keep", action="store_true", help="Do not cancel the booking afterwards")
    args = parser.parse_args()

    headers = {"X-User-Id": args.user, "Authorization": f"Bearer {args.token}"}
    booking = build_booking(
        args.role,
        date.today() + timedelta(days=args.days_ahead),
        args.time,
        args.skills or ["Python", "SQL"],
    )

    try:
        with httpx.Client(base_url=args.url, headers=headers, timeout=10.0) as client:
            resp = client.post("/bookings", json=booking)
            show("submit", resp)
            if resp.status_code != 200:
                return
            slot_id = resp.json()["slot_id"]

            show("payment", client.post(f"/bookings/{slot_id}/payment"))
            show("list", client.get("/bookings"))
            show("countdown", client.get(f"/bookings/{slot_id}/countdown"))
            if not args.keep:
                show("cancel", client.post(f"/bookings/{slot_id}/cancel"))
            show("logout", client.delete("/session"))
    except ConnectError:
        print("Connection refused. Is the FastAPI server running?")
        print("Try: uvicorn mockprep.main:app --reload --port 8001")


if __name__ == "__main__":
    main()
