"""Signal -> signed OKX market order, one request at a time.

Every invocation is independent: credentials are resolved per call, the only
side effect is the single outbound POST, and nothing is retried. Failure kinds
are raised as typed exceptions and turned into responses in one place
(``error_response``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from loguru import logger

from app.config import CredentialsError, OkxCredentials, load_credentials
from app.models import Signal, SignalValidationError, build_order_body
from app.okx_client import OkxTradeClient
from app.okx_sign import auth_headers, build_prehash, iso_timestamp, serialize_body, sign_payload


class MethodNotAllowed(Exception):
    def __init__(self, method: str) -> None:
        super().__init__("Method not allowed")
        self.method = method


@dataclass(slots=True)
class HandlerResponse:
    status_code: int
    content: dict[str, Any] = field(default_factory=dict)


def error_response(exc: Exception) -> HandlerResponse:
    if isinstance(exc, MethodNotAllowed):
        return HandlerResponse(405, {"error": "Method not allowed"})
    if isinstance(exc, SignalValidationError):
        return HandlerResponse(400, {"error": str(exc)})
    if isinstance(exc, CredentialsError):
        return HandlerResponse(500, {"error": str(exc)})
    return HandlerResponse(500, {"error": "Internal server error", "message": str(exc)})


class OrderSubmissionHandler:
    def __init__(
        self,
        client: OkxTradeClient,
        credentials_provider: Callable[[], OkxCredentials] = load_credentials,
        clock: Callable[[], datetime] | None = None,
        simulated_trading: bool = False,
    ) -> None:
        self.client = client
        self.credentials_provider = credentials_provider
        self.clock = clock
        self.simulated_trading = simulated_trading

    async def handle(self, method: str, body: Any) -> HandlerResponse:
        try:
            return await self._submit(method, body)
        except (MethodNotAllowed, SignalValidationError, CredentialsError) as exc:
            logger.warning("Order request rejected: {}", exc)
            return error_response(exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Order submission failed: {}", exc)
            return error_response(exc)

    async def _submit(self, method: str, body: Any) -> HandlerResponse:
        if method.upper() != "POST":
            raise MethodNotAllowed(method)

        signal = Signal.from_payload(body)
        credentials = self.credentials_provider()

        timestamp = iso_timestamp(self.clock() if self.clock else None)
        order_body = build_order_body(signal)
        body_str = serialize_body(order_body)

        prehash = build_prehash(timestamp, "POST", self.client.request_path, body_str)
        signature = sign_payload(credentials.secret_key, prehash)
        headers = auth_headers(credentials, timestamp, signature, simulated=self.simulated_trading)

        logger.info(
            "Submitting {} {} (attached SL/TP: {})",
            order_body["side"],
            order_body["instId"],
            "attachAlgoOrds" in order_body,
        )
        result = await self.client.place_order(body_str, headers)
        logger.info("OKX responded status={} for {}", result.status, order_body["instId"])

        return HandlerResponse(
            result.status,
            {
                "success": result.ok,
                "data": result.data,
                "debug": {
                    "timestamp": timestamp,
                    "orderBody": order_body,
                    "hasAttachedOrders": "attachAlgoOrds" in order_body,
                },
            },
        )
