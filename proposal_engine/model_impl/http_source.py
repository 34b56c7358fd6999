# PURPOSE: Product source backed by the external product-listing API.
# CONTEXT: One POST per listing code; the payload carries the code and a returns
#          lookback period. Retries and fallback live in the recommender's fetch policy,
#          so this class makes exactly one attempt per call.
# CREDITS: Original work — no external code reuse.

from __future__ import annotations

import os
from typing import List, Optional

import requests
import structlog

from proposal_engine.constants.product_catalog import PRODUCT_CODES
from proposal_engine.model_interface.product_source import ProductSource, ProductSourceError
from proposal_engine.tools import http_tool

log = structlog.get_logger(__name__)

PRODUCTS_API_URL = os.getenv("PRODUCTS_API_URL", "")
PRODUCTS_API_KEY = os.getenv("PRODUCTS_API_KEY", "")
PRODUCTS_ACCOUNT_ID = os.getenv("PRODUCTS_ACCOUNT_ID", "")
PRODUCT_FETCH_TIMEOUT = float(os.getenv("PRODUCT_FETCH_TIMEOUT", "10"))


class HttpProductSource(ProductSource):
    """
    Live listing source.

    attributes:
    - url: str – listing endpoint (PRODUCTS_API_URL).
    - api_key: str – sent as the Authorization header (PRODUCTS_API_KEY).
    - timeout: float – per-request timeout in seconds.
    """

    name = "live"

    def __init__(self, url: Optional[str] = None, api_key: Optional[str] = None,
                 timeout: Optional[float] = None, account_id: Optional[str] = None):
        self.url = url or PRODUCTS_API_URL
        self.api_key = api_key if api_key is not None else PRODUCTS_API_KEY
        self.timeout = timeout or PRODUCT_FETCH_TIMEOUT
        self.account_id = account_id if account_id is not None else PRODUCTS_ACCOUNT_ID
        if not self.url:
            raise ValueError("PRODUCTS_API_URL is not configured")

    def _payload(self, code: str, lookback: str) -> dict:
        payload = {"product_code": code, "returns": lookback}
        if code == PRODUCT_CODES["unlistedStocks"] and self.account_id:
            payload["account_id"] = self.account_id
        return payload

    def fetch_candidates(self, vehicle_type: str, lookback: str = "1 Month") -> List[dict]:
        """
        Fetch raw listing records for a vehicle type.

        returns:
        - list[dict] – raw records (may be empty).

        raises:
        - ProductSourceError – on transport errors, HTTP errors or an unknown vehicle type.
        """
        code = PRODUCT_CODES.get(vehicle_type)
        if code is None:
            raise ProductSourceError(f"no listing for vehicle type {vehicle_type!r}")

        headers = {"Authorization": self.api_key} if self.api_key else {}
        try:
            data = http_tool.post_json(self.url, self._payload(code, lookback), headers, self.timeout)
        except (requests.exceptions.RequestException, ValueError) as e:
            raise ProductSourceError(f"{code}: {type(e).__name__}: {e}") from e

        # PMS wraps its list in "schemes", unlisted stocks in "products".
        if isinstance(data, dict):
            if vehicle_type == "pms" and isinstance(data.get("schemes"), list):
                return data["schemes"]
            if vehicle_type == "unlistedStocks" and isinstance(data.get("products"), list):
                return data["products"]
            log.warning("products.unexpected_shape", code=code, keys=sorted(data)[:10])
            return []
        if isinstance(data, list):
            return data
        return []
