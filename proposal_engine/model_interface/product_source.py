from typing import List


class ProductSourceError(RuntimeError):
    """A product source could not return a listing."""


class ProductSource:
    """Capability: raw candidate records for a vehicle type over a lookback period."""

    name = "abstract"

    def fetch_candidates(self, vehicle_type: str, lookback: str = "1 Month") -> List[dict]:
        raise NotImplementedError
