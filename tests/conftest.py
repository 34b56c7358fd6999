import pytest


@pytest.fixture(autouse=True)
def _offline_env(monkeypatch):
    # Keep every test on the static product source with tracing off.
    for var in ("PRODUCT_SOURCE", "PRODUCTS_API_URL", "USE_XRAY"):
        monkeypatch.delenv(var, raising=False)
