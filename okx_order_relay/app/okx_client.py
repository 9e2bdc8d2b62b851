"""Thin async wrapper around the OKX order endpoint."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from loguru import logger


@dataclass(slots=True)
class ExchangeResponse:
    status: int
    data: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class OkxTradeClient:
    """Issues one signed POST per call. Upstream rejections are returned, not raised."""

    def __init__(
        self,
        base_url: str = "https://www.okx.com",
        request_path: str = "/api/v5/trade/order",
        timeout: float | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.request_path = request_path
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.request_path}"

    async def place_order(self, body: str, headers: dict[str, str]) -> ExchangeResponse:
        return await asyncio.to_thread(self._post_sync, body, headers)

    def _post_sync(self, body: str, headers: dict[str, str]) -> ExchangeResponse:
        req = Request(url=self.url, data=body.encode("utf-8"), method="POST", headers=headers)
        kwargs: dict[str, Any] = {}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        try:
            with urlopen(req, **kwargs) as resp:
                status = resp.status
                raw = resp.read().decode("utf-8")
        except HTTPError as exc:
            status = exc.code
            raw = exc.read().decode("utf-8", errors="ignore")
            logger.warning("OKX answered HTTP {} for {}", status, self.request_path)
        except URLError as exc:
            raise RuntimeError(f"URLError: {exc.reason}") from exc

        return ExchangeResponse(status=status, data=json.loads(raw))
