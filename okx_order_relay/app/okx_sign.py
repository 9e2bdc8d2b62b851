"""Helpers for signing OKX v5 REST requests."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
from datetime import UTC, datetime
from typing import Any

from app.config import OkxCredentials


def iso_timestamp(now: datetime | None = None) -> str:
    """Return UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    moment = (now or datetime.now(UTC)).astimezone(UTC)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def serialize_body(body: dict[str, Any]) -> str:
    """Compact JSON in key insertion order; the exact string is signed and sent."""
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False)


def build_prehash(timestamp: str, method: str, request_path: str, body: str) -> str:
    return f"{timestamp}{method.upper()}{request_path}{body}"


def sign_payload(secret: str, payload: str) -> str:
    """Return base64-encoded HMAC SHA256 digest for payload."""
    digest = hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def auth_headers(
    credentials: OkxCredentials,
    timestamp: str,
    signature: str,
    simulated: bool = False,
) -> dict[str, str]:
    headers = {
        "OK-ACCESS-KEY": credentials.api_key,
        "OK-ACCESS-SIGN": signature,
        "OK-ACCESS-TIMESTAMP": timestamp,
        "OK-ACCESS-PASSPHRASE": credentials.passphrase,
        "Content-Type": "application/json",
    }
    if simulated:
        headers["x-simulated-trading"] = "1"
    return headers
