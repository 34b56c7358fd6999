from typing import List

from proposal_engine.constants.product_catalog import LISTING_SNAPSHOTS, PRODUCT_CODES
from proposal_engine.model_interface.product_source import ProductSource


class StaticProductSource(ProductSource):
    name = "static-listing"

    def fetch_candidates(self, vehicle_type: str, lookback: str = "1 Month") -> List[dict]:
        code = PRODUCT_CODES.get(vehicle_type)
        return [dict(r) for r in LISTING_SNAPSHOTS.get(code, ())]
