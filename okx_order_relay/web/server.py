"""HTTP surface for the order relay."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import RelayConfig, load_config
from app.okx_client import OkxTradeClient
from app.order_handler import OrderSubmissionHandler


ROOT_DIR = Path(__file__).resolve().parents[1]
ORDER_ROUTE = "/api/create-order"
ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def build_handler(config: RelayConfig) -> OrderSubmissionHandler:
    client = OkxTradeClient(
        base_url=config.base_url,
        request_path=config.request_path,
        timeout=config.request_timeout,
    )
    return OrderSubmissionHandler(client, simulated_trading=config.simulated_trading)


async def _read_json(request: Request) -> Any:
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Request body on {} is not valid JSON", request.url.path)
        return None


def create_app(handler: OrderSubmissionHandler | None = None, config: RelayConfig | None = None) -> FastAPI:
    config = config or load_config(ROOT_DIR / "config.yml")
    order_handler = handler or build_handler(config)
    app = FastAPI(title="OKX order relay")

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.api_route(ORDER_ROUTE, methods=ALL_METHODS)
    async def create_order(request: Request):
        body = await _read_json(request) if request.method == "POST" else None
        result = await order_handler.handle(request.method, body)
        return JSONResponse(status_code=result.status_code, content=result.content)

    @app.exception_handler(StarletteHTTPException)
    async def order_route_http_error(request: Request, exc: StarletteHTTPException):
        # Verbs outside ALL_METHODS never reach create_order; answer them like any other non-POST.
        if exc.status_code == 405 and request.url.path == ORDER_ROUTE:
            result = await order_handler.handle(request.method, None)
            return JSONResponse(status_code=result.status_code, content=result.content)
        return await http_exception_handler(request, exc)

    return app
