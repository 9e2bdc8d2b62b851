import pytest
from fastapi.testclient import TestClient

from app.order_handler import OrderSubmissionHandler
from tests.fakes import FakeOkxClient
from web.server import create_app


@pytest.fixture
def client_and_transport(credentials):
    transport = FakeOkxClient()
    handler = OrderSubmissionHandler(transport, credentials_provider=lambda: credentials)
    return TestClient(create_app(handler=handler)), transport


def test_health(client_and_transport):
    client, _ = client_and_transport
    assert client.get("/health").json() == {"status": "ok"}


def test_get_is_405_json(client_and_transport):
    client, transport = client_and_transport
    response = client.get("/api/create-order")
    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}
    assert transport.calls == []


@pytest.mark.parametrize("method", ["TRACE", "PURGE"])
def test_unlisted_methods_get_the_same_405_body(client_and_transport, method):
    client, transport = client_and_transport
    response = client.request(method, "/api/create-order")
    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}
    assert transport.calls == []


def test_unknown_route_keeps_default_404(client_and_transport):
    client, _ = client_and_transport
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert response.json() == {"detail": "Not Found"}


def test_invalid_json_body_is_400(client_and_transport):
    client, transport = client_and_transport
    response = client.post("/api/create-order", content=b"not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields: signal.ticker and signal.side"}
    assert transport.calls == []


def test_post_relays_exchange_response(client_and_transport):
    client, transport = client_and_transport
    response = client.post("/api/create-order", json={"signal": {"ticker": "BTC-USDT", "side": "buy", "stopLoss": 41000, "target": 45000}})
    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["data"] == transport.data
    assert payload["debug"]["hasAttachedOrders"] is True
    algo = payload["debug"]["orderBody"]["attachAlgoOrds"][0]
    assert (algo["slTriggerPx"], algo["tpTriggerPx"]) == ("41000", "45000")
    assert len(transport.calls) == 1


def test_upstream_503_is_mirrored(credentials):
    transport = FakeOkxClient(status=503, data={"code": "50001"})
    handler = OrderSubmissionHandler(transport, credentials_provider=lambda: credentials)
    response = TestClient(create_app(handler=handler)).post("/api/create-order", json={"signal": {"ticker": "BTC-USDT", "side": "sell"}})
    assert response.status_code == 503
    assert response.json()["success"] is False
