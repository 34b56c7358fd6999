import json

from proposal_engine.lambda_handler import handler
from proposal_engine.narrative import RenderError


class Ctx:
    aws_request_id = "req-123"


QUESTIONNAIRE = {
    "personalInfo": {"name": "Handler Test", "age": 45},
    "investmentObjectives": {"investmentHorizon": "medium_term", "initialInvestmentAmount": 60_000_000},
    "riskTolerance": {"marketDropReaction": "do_nothing", "maxAcceptableLoss": 15,
                      "returnsVsStabilityPreference": "balanced", "preferredPortfolioStyle": "balanced"},
}


def _call(body, **event):
    evt = {"body": json.dumps(body), "headers": {"x-correlation-id": "corr-1"}}
    evt.update(event)
    resp = handler(evt, Ctx())
    return resp["statusCode"], json.loads(resp["body"])


def test_handler_proposal_ok():
    status, body = _call(QUESTIONNAIRE)
    assert status == 200
    assert body["status"] == "ok"
    assert body["riskProfile"]["riskCategory"] == "Moderate"
    assert body["document"].startswith("# Investment Proposal for Handler Test")


def test_handler_risk_assessment_action():
    status, body = _call(dict(QUESTIONNAIRE, action="risk-assessment"))
    assert status == 200
    assert body["riskScore"] == 17


def test_handler_missing_field_is_400():
    payload = {k: v for k, v in QUESTIONNAIRE.items() if k != "riskTolerance"}
    status, body = _call(payload)
    assert status == 400
    assert body["status"] == "error"
    assert body["error"] == "Missing required field: riskTolerance"


def test_handler_schema_violation_is_400():
    status, body = _call({"action": "asset-allocation", "riskCategory": "Moderate", "portfolioSize": -5})
    assert status == 400
    assert body["error"].endswith("at $.portfolioSize")


def test_handler_invalid_json_is_400():
    resp = handler({"body": "{not json"}, Ctx())
    assert resp["statusCode"] == 400
    assert json.loads(resp["body"])["status"] == "error"


def test_handler_render_error_is_distinct(monkeypatch):
    def broken(proposal):
        raise RenderError("template missing")
    monkeypatch.setattr("proposal_engine.pipeline.render_markdown", broken)
    status, body = _call(QUESTIONNAIRE)
    assert status == 500
    assert body["status"] == "render_error"


def test_handler_unexpected_exception_is_500(monkeypatch):
    def boom(payload, as_of=None):
        raise RuntimeError("boom")
    monkeypatch.setattr("proposal_engine.pipeline.score_risk", boom)
    status, body = _call(dict(QUESTIONNAIRE, action="risk-assessment"))
    assert status == 500
    assert body["error"] == "RuntimeError: boom"


def test_handler_accepts_direct_invocation():
    resp = handler({"action": "asset-allocation", "riskCategory": "Conservative", "portfolioSize": 20_000_000}, Ctx())
    assert resp["statusCode"] == 200
    assert json.loads(resp["body"])["rule"] == "small_portfolio"


def test_handler_output_schema_failure_is_500(monkeypatch):
    monkeypatch.setattr("proposal_engine.pipeline._run_id", lambda: "")
    status, body = _call(QUESTIONNAIRE)
    assert status == 500
    assert body["status"] == "error"
    assert body["error"].startswith("Proposal output failed schema:")
