"""
Observability bootstrap.

PURPOSE:
- Optionally enable AWS X-Ray tracing when USE_XRAY=1.
- Provide a subsegment context manager used around outbound product fetches.
- Degrade to a no-op when tracing is off or the SDK has no active segment.

CREDITS:
- Original work — no external code reuse.
"""
from __future__ import annotations
import os

import structlog

log = structlog.get_logger(__name__)


def xray_enabled() -> bool:
    return os.getenv("USE_XRAY", "0") == "1"


def init_observability():
    """
    Optionally initialise AWS X-Ray instrumentation.

    returns:
    - xray_recorder when configured, otherwise None.

    notes:
    - patch(("requests",)) traces the product-listing calls.
    - Setup failures are logged and tracing stays off.
    """
    if not xray_enabled():
        return None
    try:
        from aws_xray_sdk.core import xray_recorder, patch
        xray_recorder.configure(service=os.getenv("XRAY_SERVICE_NAME", "ProposalEngine"),
                                context_missing="LOG_ERROR")
        patch(("requests",))
        return xray_recorder
    except Exception as e:
        log.warning("observability.xray_init_failed", error=str(e))
        return None


class xray_segment:
    """
    Context manager for a manual X-Ray subsegment.

    usage:
    >>> with xray_segment("products.fetch.pms") as seg:
    >>>     seg.annotate("vehicle_type", "pms")

    behaviour:
    - Does nothing unless USE_XRAY=1.
    - Tracing errors never propagate to the caller; errors from the wrapped block do.
    """

    def __init__(self, name: str):
        self.name = name
        self.sub = None

    def __enter__(self):
        if not xray_enabled():
            return self
        try:
            from aws_xray_sdk.core import xray_recorder
            self.sub = xray_recorder.begin_subsegment(self.name)
        except Exception as e:
            log.debug("observability.subsegment_skipped", name=self.name, error=str(e))
            self.sub = None
        return self

    def annotate(self, key: str, value) -> None:
        if self.sub is not None:
            self.sub.put_annotation(key, value)

    def __exit__(self, exc_type, exc, tb):
        if self.sub is None:
            return False
        try:
            from aws_xray_sdk.core import xray_recorder
            if exc is not None:
                self.sub.add_exception(exc, [])
            xray_recorder.end_subsegment()
        except Exception as e:
            log.debug("observability.subsegment_close_failed", name=self.name, error=str(e))
        return False
