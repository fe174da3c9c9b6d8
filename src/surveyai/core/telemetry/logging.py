from __future__ import annotations

import logging

import structlog

SECRET_FIELDS = frozenset({"api_key", "authorization", "key", "token"})


def mask_secret_fields(logger, method_name: str, event_dict: dict) -> dict:
    for field in SECRET_FIELDS.intersection(event_dict):
        event_dict[field] = "***"
    return event_dict


def configure_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        mask_secret_fields,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
    ]

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, log_level.upper(), logging.INFO)),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str):
    """Return a structlog logger, applying default JSON config if none was set up yet."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)
