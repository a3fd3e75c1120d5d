import logging
import re
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# query parameters that carry OAuth codes or tokens
_SECRET_PARAMS = re.compile(r"([?&](?:code|token|refresh)=)[^&\s\"]*")

_handler: Optional[logging.Handler] = None


def redact(text: str) -> str:
    return _SECRET_PARAMS.sub(r"\1[redacted]", text)


class RedactSecretsFilter(logging.Filter):
    """Masks OAuth query values in access-log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = redact(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(redact(a) if isinstance(a, str) else a for a in record.args)
        return True


_redact_filter = RedactSecretsFilter()


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger."""
    global _handler

    root = logging.getLogger()
    root.setLevel(level.upper())
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    if _handler not in root.handlers:
        root.addHandler(_handler)

    # httpx logs every request URL at INFO, which would include OAuth codes
    logging.getLogger("httpx").setLevel(logging.WARNING)

    access = logging.getLogger("uvicorn.access")
    if _redact_filter not in access.filters:
        access.addFilter(_redact_filter)
