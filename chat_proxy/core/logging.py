"""Structured logging for the proxy.

Every record leaves the process as one JSON line carrying the request id of
the HTTP request that produced it. Credentials and chat text are replaced
with ``[REDACTED]`` before formatting, and client addresses are logged only
as short hashes (see ``hash_identifier``).
"""

from __future__ import annotations

import hashlib
import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from logging import LogRecord
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterable, Mapping

from chat_proxy.core.config import LogSettings, settings

REDACTED = "[REDACTED]"

SENSITIVE_KEYS_DEFAULT: frozenset[str] = frozenset(
    {
        # credentials
        "api_key",
        "perplexity_api_key",
        "authorization",
        "x-api-key",
        "token",
        "secret",
        "password",
        "cookie",
        "set-cookie",
        # user-authored chat text
        "messages",
        "content",
        "user_message",
        "upstream_body",
    }
)

# Attributes every LogRecord has; anything else was passed through ``extra``.
_RECORD_ATTRS = frozenset(vars(LogRecord("", logging.INFO, "", 0, "", None, None))) | {
    "message",
    "asctime",
}

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_request_id(request_id: str | None) -> None:
    _request_id.set(request_id)


def get_request_id() -> str | None:
    """Request id of the HTTP request being served, if any."""
    return _request_id.get()


def clear_request_id() -> None:
    _request_id.set(None)


def hash_identifier(value: str) -> str:
    """Return a short, stable digest of an identifier (IP address, key).

    Args:
        value: Raw identifier.

    Returns:
        First 16 hex chars of the SHA-256 digest.
    """
    return hashlib.sha256(value.encode()).hexdigest()[:16]


class Redactor:
    """Replaces values stored under sensitive keys, at any nesting depth."""

    def __init__(self, sensitive_keys: Iterable[str] | None = None) -> None:
        keys = SENSITIVE_KEYS_DEFAULT if sensitive_keys is None else sensitive_keys
        self.keys = frozenset(key.lower() for key in keys)

    def is_sensitive(self, key: Any) -> bool:
        return str(key).lower() in self.keys

    def scrub(self, value: Any) -> Any:
        if isinstance(value, Mapping):
            return {k: REDACTED if self.is_sensitive(k) else self.scrub(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return type(value)(self.scrub(item) for item in value)
        return value

    def extras(self, record: LogRecord) -> dict[str, Any]:
        """Return the ``extra`` fields of ``record`` with secrets removed."""
        return {
            key: REDACTED if self.is_sensitive(key) else self.scrub(value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }


class RequestIdFilter(logging.Filter):
    """Copy the context request id onto records that lack one."""

    def filter(self, record: LogRecord) -> bool:  # noqa: D401
        if getattr(record, "request_id", None) is None:
            request_id = get_request_id()
            if request_id:
                record.request_id = request_id
        return True


class SensitiveDataFilter(logging.Filter):
    """Redact extras in place so non-JSON formatters are safe too."""

    def __init__(self, sensitive_keys: Iterable[str] | None = None) -> None:
        super().__init__()
        self.redactor = Redactor(sensitive_keys)

    def filter(self, record: LogRecord) -> bool:  # noqa: D401
        for key, value in self.redactor.extras(record).items():
            setattr(record, key, value)
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, extras."""

    def __init__(
        self,
        *,
        sensitive_keys: Iterable[str] | None = None,
        ensure_ascii: bool = False,
    ) -> None:
        super().__init__()
        self.redactor = Redactor(sensitive_keys)
        self.ensure_ascii = ensure_ascii

    def format(self, record: LogRecord) -> str:  # noqa: D401
        line: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = getattr(record, "request_id", None) or get_request_id()
        if request_id:
            line["request_id"] = request_id

        line.update(self.redactor.extras(record))
        if record.exc_info:
            line["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(line, default=str, ensure_ascii=self.ensure_ascii)


def _build_handler(log_settings: LogSettings) -> logging.Handler:
    if log_settings.output.lower() != "file":
        return logging.StreamHandler(sys.stdout)

    path = Path(log_settings.file_path or "logs/chat_proxy.log")
    path.parent.mkdir(parents=True, exist_ok=True)
    if log_settings.max_bytes > 0:
        return RotatingFileHandler(
            path,
            maxBytes=log_settings.max_bytes,
            backupCount=log_settings.backup_count,
            encoding="utf-8",
        )
    return logging.FileHandler(path, encoding="utf-8")


def configure_logging(log_settings: LogSettings | None = None) -> None:
    """Install the JSON (or plain) handler on the root logger.

    Args:
        log_settings: Logging settings; the global ``settings.log`` when omitted.
    """
    cfg = log_settings or settings.log
    level = getattr(logging, cfg.level.upper(), logging.INFO)

    handler = _build_handler(cfg)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    if cfg.format.lower() == "plain":
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # One access line per request comes from our middleware.
    logging.getLogger("uvicorn.access").propagate = False
    # The SDK logs request bodies at DEBUG.
    logging.getLogger("openai").setLevel(max(level, logging.INFO))
    logging.getLogger("httpx").setLevel(logging.WARNING)
