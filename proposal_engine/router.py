from typing import Any, Callable, Dict

from proposal_engine import pipeline

DEFAULT_ACTION = "proposal"

_ROUTES: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    "risk-assessment": pipeline.run_risk_assessment,
    "manual-allocation": pipeline.run_manual_allocation,
    "asset-allocation": pipeline.run_asset_allocation,
    "product-recommendations": pipeline.run_product_recommendations,
    "proposal": pipeline.run_pipeline,
}


def route(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Dispatch on payload["action"] (default "proposal"); the action key is stripped
    before the flow sees the payload.

    raises:
    - ValueError – unknown action.
    """
    body = dict(payload or {})
    action = body.pop("action", None) or DEFAULT_ACTION
    fn = _ROUTES.get(action)
    if fn is None:
        raise ValueError(f"Unknown action: {action}")
    return fn(body)
