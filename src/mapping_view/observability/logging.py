"""Logging helpers (formatter + dictConfig builder)."""

from __future__ import annotations

import json
import logging
import os
import time
from collections.abc import Mapping
from logging.config import dictConfig
from typing import Any

from opentelemetry import baggage, trace

from mapping_view.config.observability import MappingViewSettings, load_settings


def _running_in_managed_runtime() -> bool:
    # Cloud Run and Kubernetes log ingestion parse JSON lines into structured payloads.
    return bool(os.getenv("K_SERVICE") or os.getenv("KUBERNETES_SERVICE_HOST"))


def _encode(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


def _structured_payload(record: logging.LogRecord) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "message": record.getMessage(),
        "severity": record.levelname,
        "logger": record.name,
        "timestamp": (
            f"{time.strftime('%Y-%m-%dT%H:%M:%S', time.gmtime(record.created))}"
            f".{int(record.msecs):03d}Z"
        ),
    }
    record_data = record.__dict__.get("data")
    if record_data:
        payload["data"] = record_data
    json_fields = record.__dict__.get("json_fields")
    if isinstance(json_fields, Mapping):
        # Base fields win over json_fields of the same name.
        for key, value in json_fields.items():
            payload.setdefault(key, value)
    return payload


class ExtrasFormatter(logging.Formatter):
    """Append structured `data` payloads when present."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        *,
        json_output: bool = False,
    ) -> None:
        super().__init__(fmt, datefmt)
        self._json_output = json_output

    def format(self, record: logging.LogRecord) -> str:
        if self._json_output or _running_in_managed_runtime():
            return _encode(_structured_payload(record))

        formatted = super().format(record)
        record_data = record.__dict__.get("data")
        if record_data:
            return f"{formatted} | data={_encode(record_data)}"
        return formatted


class OtelContextLogFilter(logging.Filter):
    """Inject OpenTelemetry trace context + baggage into json_fields."""

    def filter(self, record: logging.LogRecord) -> bool:
        otel: dict[str, Any] = {}
        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            otel["trace_id"] = f"{span_context.trace_id:032x}"
            otel["span_id"] = f"{span_context.span_id:016x}"

        baggage_values = baggage.get_all()
        if baggage_values:
            otel["baggage"] = {key: str(value) for key, value in baggage_values.items()}

        if otel:
            json_fields = record.__dict__.get("json_fields")
            fields = dict(json_fields) if isinstance(json_fields, Mapping) else {}
            fields["otel"] = otel
            record.__dict__["json_fields"] = fields
        return True


def build_log_config(
    settings: MappingViewSettings,
    *,
    extra_loggers: Mapping[str, dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Return a dictConfig-compatible logging configuration."""

    loggers: dict[str, dict[str, Any]] = {
        "mapping_view": {
            "level": settings.log_level,
            "handlers": ["console"],
            "propagate": False,
        },
    }
    if extra_loggers:
        loggers.update(extra_loggers)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {
                "()": ExtrasFormatter,
                "fmt": "%(asctime)s %(levelname)s %(name)s: %(message)s",
                "datefmt": "%Y-%m-%dT%H:%M:%S",
                "json_output": settings.json_logs,
            }
        },
        "filters": {
            "otel_context": {"()": OtelContextLogFilter},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "console",
                "stream": "ext://sys.stdout",
                "filters": ["otel_context"],
            }
        },
        "root": {"level": settings.log_level, "handlers": ["console"]},
        "loggers": loggers,
    }


def configure_logging(
    settings: MappingViewSettings | None = None,
    *,
    extra_loggers: Mapping[str, dict[str, Any]] | None = None,
) -> None:
    """Apply the logging config built from ``settings`` (env when omitted)."""

    resolved = settings if settings is not None else load_settings()
    logger = logging.getLogger(__name__)
    start = time.monotonic()
    dictConfig(build_log_config(resolved, extra_loggers=extra_loggers))
    logger.debug(
        "configured logging",
        extra={
            "data": {
                "level": resolved.log_level,
                "json_logs": resolved.json_logs,
                "elapsed_s": round(time.monotonic() - start, 3),
            }
        },
    )


__all__ = ["ExtrasFormatter", "OtelContextLogFilter", "build_log_config", "configure_logging"]
