from innkeeper.core.logging import RedactionProcessor, RequestContextProcessor, request_id


def test_request_context_is_attached():
    token = request_id.set("req-42")
    try:
        event = RequestContextProcessor()(None, "info", {"event": "request_completed"})
    finally:
        request_id.reset(token)

    assert event["request_id"] == "req-42"
    assert event["service"] == "innkeeper"
    assert "tenant_id" not in event


def test_sensitive_values_are_masked():
    event = RedactionProcessor()(
        None,
        "info",
        {"event": "request_completed", "authorization": "Bearer abc", "details": {"card_number": "4111"}, "path": "/api"},
    )

    assert event["authorization"] == "[REDACTED]"
    assert event["details"]["card_number"] == "[REDACTED]"
    assert event["path"] == "/api"
