"""
Logging configuration.

Handlers attach structured context through `extra={"json_fields": {...}}`
(for example the `dailyCheck` and `fileFetched` records). On Cloud Run the
google-cloud-logging handler turns those into jsonPayload fields. Locally,
each top-level field is printed as one compact JSON line under the message,
with long strings clipped so a whole email body does not flood the console.
"""

import json
import logging
import os
import sys
from typing import Any

MAX_LOCAL_STRING = 200
LOCAL_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty at INFO; every Slack, Shopify and Trello call would be logged
NOISY_LOGGERS = ("urllib3", "google.auth", "google.cloud")

_logging_configured = False


def clip_strings(value: Any, limit: int = MAX_LOCAL_STRING) -> Any:
    """
    Shorten long strings anywhere inside a json_fields value.

    >>> clip_strings({"sample": "abcdef"}, limit=3)
    {'sample': 'abc... (6 chars)'}
    """
    if isinstance(value, str) and len(value) > limit:
        return f"{value[:limit]}... ({len(value)} chars)"
    if isinstance(value, dict):
        return {k: clip_strings(v, limit) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [clip_strings(v, limit) for v in value]
    return value


class LocalFormatter(logging.Formatter):
    """Console formatter that prints json_fields one key per line."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)

        json_fields = getattr(record, "json_fields", None)
        if not isinstance(json_fields, dict) or not json_fields:
            return message

        lines = [message]
        for key, value in json_fields.items():
            rendered = json.dumps(clip_strings(value), default=str, ensure_ascii=False)
            lines.append(f"    {key}: {rendered}")
        return "\n".join(lines)


def _log_level() -> int:
    level = logging.getLevelName((os.getenv("LOG_LEVEL") or "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(service_name: str = "reminderbot"):
    """
    Configure root logging once per process.

    Uses Cloud Logging when running on Cloud Run (K_SERVICE is set),
    stdout otherwise. The level comes from LOG_LEVEL, default INFO.

    Args:
        service_name: Name of the service for log identification
    """
    global _logging_configured

    if _logging_configured:
        return

    level = _log_level()
    if os.getenv("K_SERVICE"):
        _setup_cloud_logging(service_name, level)
    else:
        _setup_local_logging(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    _logging_configured = True


def _setup_cloud_logging(service_name: str, level: int):
    try:
        import google.cloud.logging

        client = google.cloud.logging.Client()
        client.setup_logging(log_level=level)
        logging.info(f"Cloud Logging configured for service: {service_name}")
    except Exception as e:
        _setup_local_logging(level)
        logging.warning(f"Cloud Logging unavailable, logging to stdout: {e}")


def _setup_local_logging(level: int):
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(LocalFormatter(LOCAL_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
