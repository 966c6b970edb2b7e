import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

pytest.importorskip("httpx", reason="TestClient requires httpx")

from fastapi.testclient import TestClient

from main import app


@pytest.fixture
def client():
    return TestClient(app)


def bundle_payload():
    return {
        "cart": {
            "lines": [
                {
                    "id": "gid://shopify/CartLine/A",
                    "quantity": 1,
                    "merchandise": {
                        "__typename": "ProductVariant",
                        "id": "gid://shopify/ProductVariant/1",
                        "product": {"id": "gid://shopify/Product/1", "bundledComponentData": None},
                    },
                },
                {
                    "id": "gid://shopify/CartLine/B",
                    "quantity": 1,
                    "merchandise": {
                        "__typename": "ProductVariant",
                        "id": "gid://shopify/ProductVariant/2",
                        "product": {
                            "id": "gid://shopify/Product/2",
                            "bundledComponentData": {
                                "value": json.dumps([
                                    {"id": "gid://shopify/ProductVariant/5", "price": 5},
                                    {"id": "gid://shopify/ProductVariant/7", "quantity": 3, "price": 7.5},
                                ])
                            },
                        },
                    },
                },
            ]
        },
        "presentmentCurrencyRate": "1.0",
    }


def test_run_returns_line_expand_operations(client):
    response = client.post("/api/cart-transform/run", json=bundle_payload())

    assert response.status_code == 200
    assert response.json() == {
        "operations": [
            {
                "lineExpand": {
                    "cartLineId": "gid://shopify/CartLine/B",
                    "expandedCartItems": [
                        {
                            "merchandiseId": "gid://shopify/ProductVariant/5",
                            "quantity": 1,
                            "price": {"adjustment": {"fixedPricePerUnit": {"amount": "5.00"}}},
                        },
                        {
                            "merchandiseId": "gid://shopify/ProductVariant/7",
                            "quantity": 3,
                            "price": {"adjustment": {"fixedPricePerUnit": {"amount": "7.50"}}},
                        },
                    ],
                }
            }
        ]
    }


def test_run_without_bundles_returns_empty_operations(client):
    payload = {
        "cart": {"lines": [{"id": "gid://shopify/CartLine/1", "merchandise": {"__typename": "CustomProduct"}}]},
        "presentmentCurrencyRate": 1,
    }

    response = client.post("/api/cart-transform/run", json=payload)

    assert response.status_code == 200
    assert response.json() == {"operations": []}


def test_run_with_oversized_price_still_returns_result(client):
    payload = bundle_payload()
    payload["cart"]["lines"][0]["merchandise"]["product"]["bundledComponentData"] = {
        "value": '[{"id": "gid://shopify/ProductVariant/9", "price": 1e30}]'
    }

    response = client.post("/api/cart-transform/run", json=payload)

    assert response.status_code == 200
    operations = response.json()["operations"]
    assert [op["lineExpand"]["cartLineId"] for op in operations] == ["gid://shopify/CartLine/B"]


def test_run_echoes_request_id(client):
    response = client.post(
        "/api/cart-transform/run",
        json=bundle_payload(),
        headers={"X-Request-Id": "rid-123"},
    )

    assert response.headers["X-Request-Id"] == "rid-123"


def test_run_rejects_invalid_input(client):
    response = client.post("/api/cart-transform/run", json={"presentmentCurrencyRate": "1.0"})

    assert response.status_code == 422
    assert response.json()["error"] == "Validation failed"


def test_healthz(client):
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"ok": True}
