from __future__ import annotations
# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of VifColo core, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Unified exception hierarchy for VifColo.

All domain-specific exceptions derive from :class:`VifColoError`,
enabling callers to catch the entire family with a single clause::

    try:
        ...
    except VifColoError as e:
        logger.error("Domain error: %s", e)

The lifecycle controller converts these into an ``Outcome`` before
anything reaches the checkpoint orchestrator.
"""


class VifColoError(Exception):
    """Base exception for all VifColo errors."""


# ── Validation ───────────────────────────────────────────────


class ValidationError(VifColoError):
    """Device record is incomplete (missing forward device or vif name)."""


# ── Process ──────────────────────────────────────────────────


class ProcessError(VifColoError):
    """Agent script process errors."""


class StartRejectedError(ProcessError):
    """The executor refused to launch the agent script."""


class ContinuationError(ProcessError):
    """A completion continuation fired more than once."""


# ── Store I/O ────────────────────────────────────────────────


class StoreError(VifColoError):
    """Shared key-value store errors."""


class StoreReadError(StoreError):
    """Store unreachable or returned a malformed response."""

    def __init__(self, message: str, *, path: str = "") -> None:
        super().__init__(message)
        self.path = path


# ── Configuration ────────────────────────────────────────────


class ConfigError(VifColoError):
    """Configuration errors."""


class ConfigValidationError(ConfigError):
    """Configuration validation failure."""
