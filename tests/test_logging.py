import logging

from gamedev_hub.core.logging import configure_logging, redact


def test_redact_masks_oauth_query_values():
    assert redact("GET /?token=abc&refresh=xyz HTTP/1.1") == "GET /?token=[redacted]&refresh=[redacted] HTTP/1.1"
    assert redact("/connect/callback?code=s3cr3t") == "/connect/callback?code=[redacted]"
    assert redact("/users?page=2") == "/users?page=2"


def test_access_log_records_are_redacted():
    configure_logging("INFO")
    access = logging.getLogger("uvicorn.access")

    record = access.makeRecord(
        "uvicorn.access", logging.INFO, __file__, 1,
        '%s - "%s %s HTTP/%s" %d',
        ("127.0.0.1:5000", "GET", "/?token=abc&refresh=xyz", "1.1", 302),
        None,
    )
    for f in access.filters:
        f.filter(record)

    message = record.getMessage()
    assert "abc" not in message
    assert "xyz" not in message
    assert "token=[redacted]" in message


def test_configure_logging_is_idempotent():
    configure_logging("INFO")
    before = len(logging.getLogger().handlers)
    configure_logging("DEBUG")
    assert len(logging.getLogger().handlers) == before
    assert logging.getLogger().level == logging.DEBUG
    configure_logging("INFO")
