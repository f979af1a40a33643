# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0
"""
Helper script execution package.

Runs agent scripts as asyncio subprocesses and reports their exit status
through a completion callback.
"""

from __future__ import annotations

from core.supervisor.async_exec import (
    TIMEOUT_STATUS,
    AsyncExecutor,
    ExecState,
    ExecStats,
    InvocationDescriptor,
    ProcessExecutor,
)

__all__ = [
    "TIMEOUT_STATUS",
    "AsyncExecutor",
    "ExecState",
    "ExecStats",
    "InvocationDescriptor",
    "ProcessExecutor",
]
