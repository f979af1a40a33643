# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0

"""In-process store backend, used for dry runs and tests."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from core.exceptions import StoreReadError

logger = logging.getLogger(__name__)


class MemoryStore:
    """Dict-backed :class:`~core.store.base.KeyValueStore`.

    ``set``/``remove`` exist so callers can play the role of the agent
    infrastructure; the controller only uses :meth:`read`.
    """

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._unreachable = False

    async def read(self, path: str) -> str | None:
        if self._unreachable:
            raise StoreReadError(f"store unreachable reading {path}", path=path)
        if not path.startswith("/"):
            raise StoreReadError(f"malformed store path: {path!r}", path=path)
        value = self._data.get(path)
        logger.debug("store read %s -> %r", path, value)
        return value

    def set(self, path: str, value: str) -> None:
        self._data[path] = value

    def remove(self, path: str) -> None:
        self._data.pop(path, None)

    def set_unreachable(self, unreachable: bool = True) -> None:
        """Make every subsequent read fail as if the store were down."""
        self._unreachable = unreachable

    def snapshot(self) -> dict[str, str]:
        return dict(self._data)
