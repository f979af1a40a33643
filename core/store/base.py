# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0

"""Read contract for the shared hierarchical key-value store.

The store is written by the toolstack and by the agent infrastructure;
VifColo only ever reads from it.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Read-only view of the shared store.

    ``read`` returns the value at *path*, or ``None`` when the node does
    not exist.  It raises :class:`core.exceptions.StoreReadError` when the
    store is unreachable or answers with something malformed.
    """

    async def read(self, path: str) -> str | None: ...
