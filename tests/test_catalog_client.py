from decimal import Decimal

import pytest
import requests

from basket_service.domain.errors import CatalogUnavailable
from basket_service.services import catalog_client
from basket_service.services.catalog_client import CatalogClient


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        return self.payload


def test_lookup_maps_catalog_payload(monkeypatch):
    seen = {}

    def fake_get(url, params=None, timeout=None):
        seen["url"] = url
        seen["params"] = params
        return FakeResponse(
            [
                {"id": 1, "price": 100, "discount_price": None, "is_active": True, "is_published": True},
                {"id": 2, "price": "50.00", "discount_price": "40.00", "is_active": True, "is_published": False},
            ]
        )

    monkeypatch.setattr(catalog_client.requests, "get", fake_get)

    entries = CatalogClient(base_url="http://catalog/").lookup({2, 1, 3})

    assert seen["url"] == "http://catalog/products/batch"
    assert seen["params"] == {"ids": "1,2,3"}
    assert set(entries) == {1, 2}
    assert entries[1].price == Decimal("100")
    assert entries[1].discount_price is None
    assert entries[2].discount_price == Decimal("40.00")
    assert not entries[2].eligible


def test_empty_lookup_makes_no_request(monkeypatch):
    def fake_get(*args, **kwargs):
        raise AssertionError("no request expected")

    monkeypatch.setattr(catalog_client.requests, "get", fake_get)
    assert CatalogClient(base_url="http://catalog").lookup(set()) == {}


def test_failures_are_retried_then_reported(monkeypatch):
    calls = []

    def fake_get(*args, **kwargs):
        calls.append(1)
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(catalog_client.requests, "get", fake_get)

    with pytest.raises(CatalogUnavailable):
        CatalogClient(base_url="http://catalog").lookup({1})
    assert len(calls) == 3


def test_http_error_is_catalog_unavailable(monkeypatch):
    monkeypatch.setattr(
        catalog_client.requests, "get", lambda *a, **kw: FakeResponse({}, status_code=500)
    )

    with pytest.raises(CatalogUnavailable):
        CatalogClient(base_url="http://catalog").lookup({1})


def test_server_errors_are_retried(monkeypatch):
    calls = []

    def fake_get(*args, **kwargs):
        calls.append(1)
        return FakeResponse({}, status_code=503)

    monkeypatch.setattr(catalog_client.requests, "get", fake_get)

    with pytest.raises(CatalogUnavailable):
        CatalogClient(base_url="http://catalog").lookup({1})
    assert len(calls) == 3


def test_client_errors_are_not_retried(monkeypatch):
    calls = []

    def fake_get(*args, **kwargs):
        calls.append(1)
        return FakeResponse({}, status_code=400)

    monkeypatch.setattr(catalog_client.requests, "get", fake_get)

    with pytest.raises(CatalogUnavailable):
        CatalogClient(base_url="http://catalog").lookup({1})
    assert len(calls) == 1
