import pytest
import requests

from proposal_engine.model_impl import http_source
from proposal_engine.model_impl.http_source import HttpProductSource
from proposal_engine.model_impl.static_source import StaticProductSource
from proposal_engine.model_interface.loader import load_product_source
from proposal_engine.model_interface.product_source import ProductSourceError
from proposal_engine.tools import http_tool


def _capture(monkeypatch, reply):
    calls = []

    def fake_post_json(url, payload, headers=None, timeout=10.0):
        calls.append({"url": url, "payload": payload, "headers": headers, "timeout": timeout})
        if isinstance(reply, Exception):
            raise reply
        return reply

    monkeypatch.setattr("proposal_engine.tools.http_tool.post_json", fake_post_json)
    return calls


def test_pms_listing_posts_code_and_lookback(monkeypatch):
    calls = _capture(monkeypatch, {"schemes": [{"scheme_name": "Alpha"}]})
    src = HttpProductSource(url="https://listings.example/api", api_key="key-1", timeout=5.0)
    out = src.fetch_candidates("pms", "3 Months")
    assert out == [{"scheme_name": "Alpha"}]
    assert calls[0]["payload"] == {"product_code": "IVP004", "returns": "3 Months"}
    assert calls[0]["headers"] == {"Authorization": "key-1"}
    assert calls[0]["timeout"] == 5.0


def test_unlisted_stocks_send_account_and_unwrap_products(monkeypatch):
    calls = _capture(monkeypatch, {"products": [{"script_name": "Beta"}]})
    src = HttpProductSource(url="https://listings.example/api", api_key="", account_id="acct-9")
    assert src.fetch_candidates("unlistedStocks") == [{"script_name": "Beta"}]
    assert calls[0]["payload"]["account_id"] == "acct-9"
    assert calls[0]["headers"] == {}


def test_list_reply_is_returned_as_is(monkeypatch):
    _capture(monkeypatch, [{"instrument_name": "NCD"}])
    src = HttpProductSource(url="https://listings.example/api")
    assert src.fetch_candidates("debtPapers") == [{"instrument_name": "NCD"}]


def test_unexpected_shape_is_empty(monkeypatch):
    _capture(monkeypatch, {"message": "ok"})
    assert HttpProductSource(url="https://listings.example/api").fetch_candidates("aif") == []


def test_transport_errors_become_source_errors(monkeypatch):
    _capture(monkeypatch, requests.exceptions.ConnectionError("refused"))
    src = HttpProductSource(url="https://listings.example/api")
    with pytest.raises(ProductSourceError, match="IVP005"):
        src.fetch_candidates("aif")


def test_unknown_vehicle_type_is_a_source_error():
    with pytest.raises(ProductSourceError):
        HttpProductSource(url="https://listings.example/api").fetch_candidates("etf")


def test_url_is_required(monkeypatch):
    monkeypatch.setattr(http_source, "PRODUCTS_API_URL", "")
    with pytest.raises(ValueError):
        HttpProductSource()


def test_post_json_raises_for_http_errors(monkeypatch):
    class Resp:
        def __init__(self, status):
            self.status = status

        def raise_for_status(self):
            if self.status >= 400:
                raise requests.exceptions.HTTPError(f"{self.status} error")

        def json(self):
            return {"ok": True}

    sent = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        sent.update(url=url, json=json, headers=headers, timeout=timeout)
        return Resp(sent.get("status", 200))

    monkeypatch.setattr("proposal_engine.tools.http_tool.requests.post", fake_post)
    assert http_tool.post_json("https://x", {"a": 1}, {"Authorization": "k"}, 3) == {"ok": True}
    assert sent["headers"] == {"Content-Type": "application/json", "Authorization": "k"}
    assert sent["timeout"] == 3

    monkeypatch.setattr("proposal_engine.tools.http_tool.requests.post", lambda *a, **k: Resp(503))
    with pytest.raises(requests.exceptions.HTTPError):
        http_tool.post_json("https://x", {})


def test_static_source_returns_fresh_copies():
    src = StaticProductSource()
    first = src.fetch_candidates("debtPapers")
    first[0]["instrument_name"] = "changed"
    assert src.fetch_candidates("debtPapers")[0]["instrument_name"] != "changed"
    assert src.fetch_candidates("mutualFunds") == []


def test_loader_picks_static_by_default():
    assert isinstance(load_product_source(), StaticProductSource)


def test_loader_picks_http_when_url_set(monkeypatch):
    monkeypatch.setenv("PRODUCTS_API_URL", "https://listings.example/api")
    src = load_product_source()
    assert isinstance(src, HttpProductSource)
    assert src.url == "https://listings.example/api"


def test_loader_honours_explicit_factory(monkeypatch):
    monkeypatch.setenv("PRODUCTS_API_URL", "https://listings.example/api")
    monkeypatch.setenv("PRODUCT_SOURCE", "proposal_engine.model_impl.static_source:StaticProductSource")
    assert isinstance(load_product_source(), StaticProductSource)
