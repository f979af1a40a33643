# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of VifColo core, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Centralized logging configuration for VifColo.

Uses structlog in stdlib-compatible mode so that plain
``logging.getLogger()`` calls work unchanged while gaining
structured logging capabilities (context binding, JSON output, etc.).

Provides:
- setup_logging(): structlog + stdlib unified setup (console + file)
- bind_device_context() / clear_device_context(): per-device log context
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import orjson
import structlog

_DEVICE_KEYS = ("domid", "devid", "mode")


def bind_device_context(domid: int, devid: int, mode: str) -> None:
    """Tag every following log record of this task with the device identity."""
    structlog.contextvars.bind_contextvars(domid=domid, devid=devid, mode=mode)


def clear_device_context() -> None:
    structlog.contextvars.unbind_contextvars(*_DEVICE_KEYS)


def get_device_context() -> dict[str, object]:
    """Return the device identity bound to the current context, if any."""
    ctx = structlog.contextvars.get_contextvars()
    return {k: ctx[k] for k in _DEVICE_KEYS if k in ctx}


# ── Shared Processors ──────────────────────────────────────────


def _build_shared_processors() -> list:
    """Build the shared processor chain used by both structlog and stdlib."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _orjson_serializer(obj: object, **_kw) -> str:  # noqa: ANN001
    return orjson.dumps(obj, default=str).decode("utf-8")


# ── Main Setup ─────────────────────────────────────────────────


def setup_logging(
    level: str = "INFO",
    log_dir: Path | None = None,
    json_file: bool = True,
) -> None:
    """Configure logging for the entire VifColo process.

    Uses structlog's stdlib integration so that
    ``logging.getLogger("core.colo.xxx")`` calls are routed through
    structlog's processor pipeline automatically.

    Args:
        level: Root log level (DEBUG, INFO, WARNING, etc.).
        log_dir: Directory for log files. If None, file logging is disabled.
        json_file: Whether to use JSON format for the file handler.
    """
    shared_processors = _build_shared_processors()

    # ── Configure structlog itself ──────────────────────────
    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # ── Configure stdlib root logger ────────────────────────
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    # foreign_pre_chain: processes stdlib LogRecords through structlog pipeline
    # so that contextvars (domid/devid/mode) and timestamps are merged in.
    foreign_pre_chain = list(shared_processors)

    console_formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(),
        ],
        foreign_pre_chain=foreign_pre_chain,
    )
    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG)
    console.setFormatter(console_formatter)
    root.addHandler(console)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / "vifcolo.log"

        if json_file:
            renderer = structlog.processors.JSONRenderer(serializer=_orjson_serializer)
        else:
            renderer = structlog.dev.ConsoleRenderer(colors=False)

        file_formatter = structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=foreign_pre_chain,
        )

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        root.addHandler(file_handler)

    # asyncio logs every subprocess transport at DEBUG
    logging.getLogger("asyncio").setLevel(logging.WARNING)
