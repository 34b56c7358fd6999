import importlib, os
from .product_source import ProductSource


def load_product_source() -> ProductSource:
    """
    Pick the product source for this process.

    - PRODUCT_SOURCE="package.module:factory" wins when set.
    - Otherwise the HTTP source when PRODUCTS_API_URL is set, else the static snapshots.
    """
    modpath = os.getenv("PRODUCT_SOURCE")
    if modpath:
        mod, factory = modpath.split(":")
        return getattr(importlib.import_module(mod), factory)()
    if os.getenv("PRODUCTS_API_URL"):
        from proposal_engine.model_impl.http_source import HttpProductSource
        return HttpProductSource(url=os.getenv("PRODUCTS_API_URL"))
    from proposal_engine.model_impl.static_source import StaticProductSource
    return StaticProductSource()
