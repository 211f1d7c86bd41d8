"""
Structured logging with account correlation.

Features:
- JSON logs in production, pretty logs in development.
- Context-bound account_id so entitlement decisions can be traced per account.
- log_event helper for consistent structured logs with safe truncation.
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Dict, Iterator, Optional

LOGGER_NAME = "barberbook"

account_id_ctx_var: ContextVar[Optional[str]] = ContextVar("account_id", default=None)


def get_account_id(default: Optional[str] = None) -> Optional[str]:
    """Fetch the current account_id from context (if any)."""
    aid = account_id_ctx_var.get()
    return aid if aid is not None else default


@contextmanager
def bind_account_id(account_id: Optional[str]) -> Iterator[None]:
    """Attach account_id to every log record emitted inside the block."""
    token = account_id_ctx_var.set(account_id)
    try:
        yield
    finally:
        account_id_ctx_var.reset(token)


def _format_timestamp(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace('+00:00', 'Z')


class AccountIdFilter(logging.Filter):
    """Inject account_id into log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "account_id", None) is None:
            record.account_id = get_account_id()
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": _format_timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "account_id": getattr(record, "account_id", None),
        }
        for key in ("tier", "capability", "event_type", "error_code"):
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        return json.dumps(payload, default=str)


class PrettyFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        aid = getattr(record, "account_id", None)
        aid_part = f" [account={aid}]" if aid else ""
        ts = _format_timestamp(record)
        return f"{ts} {record.levelname} [barberbook]{aid_part} {record.getMessage()}"


def configure_logging(env: str = "development", level: int = logging.INFO) -> None:
    """Configure structured logging based on environment."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    formatter: logging.Formatter
    if env.lower() == "production":
        formatter = JsonFormatter()
    else:
        formatter = PrettyFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.addFilter(AccountIdFilter())

    logger.handlers = [handler]
    logger.propagate = True


def _safe_truncate(value, limit: int = 500):
    try:
        text = str(value)
    except Exception:
        return "<unserializable>"
    if len(text) <= limit:
        return text
    return text[:limit] + "...<truncated>"


def log_event(
    level: str,
    msg: str,
    *,
    account_id: Optional[str] = None,
    tier: Optional[str] = None,
    capability: Optional[str] = None,
    event_type: Optional[str] = None,
    error_code: Optional[str] = None,
    extra: Optional[Dict[str, object]] = None,
):
    """Structured logging helper with safe truncation and account correlation."""

    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        # Ensure logging configured in edge cases (tests)
        configure_logging(os.getenv("ENV", "development"))

    payload = {
        "account_id": account_id or get_account_id(),
        "tier": tier,
    }
    if capability:
        payload["capability"] = capability
    if event_type:
        payload["event_type"] = event_type
    if error_code:
        payload["error_code"] = error_code
    if extra:
        for k, v in extra.items():
            payload[k] = _safe_truncate(v)

    log_fn = getattr(logger, level, logger.info)
    log_fn(msg, extra=payload)
