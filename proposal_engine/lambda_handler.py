"""
AWS Lambda handler: parses the request, routes it, returns an API Gateway response.
Adds structured, JSON CloudWatch-friendly logs with correlation IDs.

PURPOSE:
- Entry point for AWS Lambda behind API Gateway.
- Normalises the incoming event, delegates to router.route, and maps failures to
  HTTP status codes.

CONTEXT:
- Input errors (schema violations, missing sections, bad values) → 400, status "error".
- Document rendering failures → 500, status "render_error".
- Anything else → 500, status "error".

CREDITS:
- Original work — no external code reuse.
"""

from __future__ import annotations
import json
import time
import traceback
import uuid
from typing import Any, Dict

from jsonschema import ValidationError

from proposal_engine.logging_setup import configure_logging
from proposal_engine.narrative import RenderError
from proposal_engine.observability import init_observability
from proposal_engine.proposal_io import OutputSchemaError, error_to_string
from proposal_engine.router import route


# Configure a structured logger once; emits JSON key/value logs.
log = configure_logging()
init_observability()


def _response(body: Dict[str, Any], status_code: int = 200) -> Dict[str, Any]:
    """
    Wrap a Python dict into an API Gateway compatible response.

    parameters:
    - body: dict – payload to serialise as JSON.
    - status_code: int – HTTP status code to return (defaults to 200).

    returns:
    - dict – {"statusCode": int, "headers": {...}, "body": "<json-string>"}.
    """
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body, ensure_ascii=False),
    }


def _error(status: str, message: str, status_code: int, t0: float) -> Dict[str, Any]:
    latency_ms = round((time.time() - t0) * 1000, 1)
    return _response({"status": status, "error": message, "latency_ms": latency_ms}, status_code)


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """
    Lambda entry point.

    flow:
    1) Bind request/correlation IDs for traceability.
    2) Normalise body (handles API Gateway proxy format if present).
    3) route(body) and wrap the result.

    returns:
    - dict – API Gateway compatible response with JSON body.
    """
    t0 = time.time()

    request_id = getattr(context, "aws_request_id", None) or str(uuid.uuid4())
    correlation_id = (event.get("headers", {}) or {}).get("x-correlation-id") or str(uuid.uuid4())
    rlog = log.bind(request_id=request_id, correlation_id=correlation_id)
    rlog.info("request.received", event_type=type(event).__name__)

    body = event
    if isinstance(event, dict) and "body" in event:
        try:
            body = json.loads(event["body"]) if isinstance(event["body"], str) else (event["body"] or {})
        except json.JSONDecodeError as e:
            rlog.warning("request.body_parse_failed", error=str(e))
            return _error("error", f"Invalid JSON body: {e}", 400, t0)
    if not isinstance(body, dict):
        return _error("error", "Request body must be a JSON object", 400, t0)

    try:
        result = route(body)
    except OutputSchemaError as e:
        rlog.error("response.output_invalid", error=str(e))
        return _error("error", str(e), 500, t0)
    except (ValidationError, ValueError) as e:
        # MissingFieldError is a ValueError.
        msg = error_to_string(e)
        rlog.warning("response.invalid_request", error=msg)
        return _error("error", msg, 400, t0)
    except RenderError as e:
        rlog.error("response.render_error", error=str(e))
        return _error("render_error", str(e), 500, t0)
    except Exception as e:
        rlog.error("response.error", error=str(e), traceback=traceback.format_exc(limit=2))
        return _error("error", f"{type(e).__name__}: {e}", 500, t0)

    latency_ms = round((time.time() - t0) * 1000, 1)
    rlog.info("response.success", action=body.get("action", "proposal"), latency_ms=latency_ms)
    return _response(result, 200)
