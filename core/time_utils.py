from __future__ import annotations
# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0

"""Timezone-aware datetime helpers."""

from datetime import datetime


def now_local() -> datetime:
    """Return current time as a timezone-aware datetime in the host zone."""
    return datetime.now().astimezone()
