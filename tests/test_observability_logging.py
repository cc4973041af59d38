import json
import logging
from types import SimpleNamespace

from starlette.requests import Request
from starlette.responses import Response

from app.salonpos.core.logging import log_checkout_event
from app.salonpos.core.metrics import metrics
from app.salonpos.middleware.observability import build_request_log_payload
from tests.checkout_helpers import add_service, seed_tenant, start_session


def test_build_request_log_payload():
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/salonpos/checkout/add-item",
        "headers": [],
        "route": SimpleNamespace(path="/salonpos/checkout/add-item"),
    }
    request = Request(scope)
    request.state.trace_id = "trace-1"
    request.state.tenant_id = "tenant-1"
    request.state.branch_id = "branch-1"
    request.state.user_id = "user-1"
    request.state.error_code = None
    response = Response(status_code=200)

    payload = build_request_log_payload(
        request=request,
        response=response,
        latency_ms=12.3456,
        db_time_ms=4.5678,
    )

    assert payload["trace_id"] == "trace-1"
    assert payload["tenant_id"] == "tenant-1"
    assert payload["branch_id"] == "branch-1"
    assert payload["route"] == "/salonpos/checkout/add-item"
    assert payload["status_code"] == 200
    assert payload["latency_ms"] == 12.35
    assert payload["db_time_ms"] == 4.57


def test_checkout_events_drop_empty_fields(caplog):
    logger = logging.getLogger("salonpos.test")
    with caplog.at_level(logging.INFO, logger="salonpos.test"):
        log_checkout_event(logger, "checkout.start", session_id="s-1", user_id=None)

    payload = json.loads(caplog.records[-1].getMessage())
    assert payload == {"event": "checkout.start", "session_id": "s-1"}


def test_metrics_endpoint_reports_checkout_counters(client, db_session):
    metrics.reset()
    tenant = seed_tenant(db_session)
    session = start_session(client, tenant)
    add_service(client, tenant, session["id"])

    response = client.get("/salonpos/ops/metrics")

    assert response.status_code == 200
    body = response.text
    assert 'checkout_sessions_started_total{origin="walk_in"} 1.0' in body
    assert "http_requests_total" in body
