# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of VifColo core, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""xenstore backend: ``xenstore-read`` CLI wrapper.

Requires the Xen tools to be installed in the control domain.
``xenstore-read`` reports a missing node as ``couldn't read path <p>``
with exit status 1; that case maps to ``None``.  Any other failure
(daemon not running, permission denied, binary missing, hang) is a
:class:`~core.exceptions.StoreReadError`.
"""

from __future__ import annotations

import asyncio
import logging

from core.exceptions import StoreReadError

logger = logging.getLogger(__name__)

_NOT_FOUND_MARKER = "couldn't read path"


class XenstoreStore:
    """:class:`~core.store.base.KeyValueStore` backed by ``xenstore-read``."""

    def __init__(self, read_command: str = "xenstore-read", timeout: float = 5.0) -> None:
        self.read_command = read_command
        self.timeout = timeout

    async def read(self, path: str) -> str | None:
        try:
            proc = await asyncio.create_subprocess_exec(
                self.read_command, path,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            raise StoreReadError(
                f"cannot run {self.read_command}: {e}", path=path,
            ) from e

        try:
            async with asyncio.timeout(self.timeout):
                stdout_bytes, stderr_bytes = await proc.communicate()
        except TimeoutError as e:
            await self._reap(proc)
            raise StoreReadError(
                f"{self.read_command} {path} timed out after {self.timeout}s", path=path,
            ) from e
        except asyncio.CancelledError:
            await self._reap(proc)
            raise

        stderr = stderr_bytes.decode("utf-8", errors="replace").strip()
        if proc.returncode == 0:
            try:
                value = stdout_bytes.decode("utf-8")
            except UnicodeDecodeError as e:
                raise StoreReadError(f"non UTF-8 value at {path}", path=path) from e
            # xenstore-read terminates every value with a newline
            if value.endswith("\n"):
                value = value[:-1]
            logger.debug("xenstore read %s -> %r", path, value)
            return value

        if _NOT_FOUND_MARKER in stderr:
            logger.debug("xenstore read %s -> (absent)", path)
            return None

        raise StoreReadError(
            f"{self.read_command} {path} failed (rc={proc.returncode}): {stderr or 'no output'}",
            path=path,
        )

    @staticmethod
    async def _reap(proc: asyncio.subprocess.Process) -> None:
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
        await proc.wait()
