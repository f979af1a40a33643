# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0
"""
Shared key-value store access.

Only the read side of the store is used: interface name overrides and the
agent status record both live in xenstore.
"""

from __future__ import annotations

from core.config.models import StoreConfig
from core.store.base import KeyValueStore
from core.store.memory import MemoryStore
from core.store.xenstore import XenstoreStore


def create_store(config: StoreConfig) -> KeyValueStore:
    """Instantiate the backend selected by *config*."""
    if config.backend == "memory":
        return MemoryStore(config.seed)
    return XenstoreStore(read_command=config.read_command, timeout=config.read_timeout_s)


__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "XenstoreStore",
    "create_store",
]
