# PURPOSE: Small helper to POST JSON to an external service and decode the reply.
# CONTEXT: Used by the HTTP product source to call the product-listing API.
# CREDITS: Original work — no external code reuse.

import requests
from typing import Any, Dict, Optional


def post_json(url: str, payload: Dict[str, Any], headers: Optional[Dict[str, str]] = None,
              timeout: Optional[float] = 10.0) -> Any:
    """
    POST a JSON body and return the decoded JSON response.

    parameters:
    - url: str – full endpoint URL.
    - payload: dict – request body, serialised as JSON.
    - headers: dict (optional) – extra headers (e.g. Authorization).
    - timeout: float (optional) – max seconds to wait for a response (default: 10).

    returns:
    - Any – parsed JSON body (list or dict).

    raises:
    - requests.exceptions.RequestException – on connection errors, timeouts or HTTP errors.
    - ValueError – if the body is not valid JSON.
    """
    h = {"Content-Type": "application/json"}
    h.update(headers or {})
    r = requests.post(url, json=payload, headers=h, timeout=timeout)
    r.raise_for_status()  # HTTP errors raise instead of returning an error page.
    return r.json()
