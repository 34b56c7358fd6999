import pytest
import structlog

from proposal_engine.logging_setup import SERVICE_NAME, configure_logging
from proposal_engine.observability import init_observability, xray_segment


class FakeSub:
    def __init__(self):
        self.annotations = {}
        self.exceptions = []

    def put_annotation(self, key, value):
        self.annotations[key] = value

    def add_exception(self, exc, stack):
        self.exceptions.append(exc)


def test_configure_logging_binds_service(monkeypatch):
    monkeypatch.setenv("ENV", "test")
    log = configure_logging()
    ctx = structlog.get_context(log)
    assert ctx["service"] == SERVICE_NAME
    assert ctx["env"] == "test"


def test_tracing_off_is_a_no_op():
    assert init_observability() is None
    with xray_segment("products.fetch.pms") as seg:
        seg.annotate("vehicle_type", "pms")
    assert seg.sub is None


def test_block_errors_still_propagate():
    with pytest.raises(KeyError):
        with xray_segment("products.fetch.pms"):
            raise KeyError("x")


def test_subsegment_records_annotations_and_errors(monkeypatch):
    from aws_xray_sdk.core import xray_recorder

    monkeypatch.setenv("USE_XRAY", "1")
    sub, ended = FakeSub(), []
    monkeypatch.setattr(xray_recorder, "begin_subsegment", lambda name: sub)
    monkeypatch.setattr(xray_recorder, "end_subsegment", lambda *a, **k: ended.append(True))

    with pytest.raises(RuntimeError):
        with xray_segment("products.fetch.aif") as seg:
            seg.annotate("vehicle_type", "aif")
            raise RuntimeError("listing down")

    assert sub.annotations == {"vehicle_type": "aif"}
    assert len(sub.exceptions) == 1
    assert ended == [True]
