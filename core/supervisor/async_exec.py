"""
Asynchronous executor for short-lived helper scripts.
"""

# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import asyncio
import logging
import os
import signal
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Protocol

from core.exceptions import StartRejectedError
from core.time_utils import now_local

logger = logging.getLogger(__name__)

# Status reported when the executor kills a run on timeout
TIMEOUT_STATUS = -signal.SIGKILL

ExitCallback = Callable[[int], None]


# ── Descriptor ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class InvocationDescriptor:
    """Fully resolved command for one script run.

    ``env`` is overlaid on the executor's own environment.  ``callback``
    receives the exit status exactly once after the run has been accepted:
    the process return code, or a negative signal number when it was killed.
    """
    command: str
    args: tuple[str, ...]
    env: tuple[tuple[str, str], ...]
    timeout_ms: int
    callback: ExitCallback = field(compare=False, repr=False)
    what: str = ""
    suppress_stdio: bool = True

    @property
    def env_dict(self) -> dict[str, str]:
        return dict(self.env)


class ProcessExecutor(Protocol):
    """Start contract consumed by the lifecycle controller.

    ``start`` returns once the process has been launched, or raises
    :class:`~core.exceptions.StartRejectedError`.  After a successful
    return, ``descriptor.callback`` is invoked exactly once, no later
    than ``descriptor.timeout_ms`` after start.
    """

    async def start(self, descriptor: InvocationDescriptor) -> None: ...


# ── Execution State ────────────────────────────────────────────────

class ExecState(Enum):
    """State of one script run."""
    RUNNING = "running"        # Process spawned, waiting for exit
    EXITED = "exited"          # Process exited on its own
    TIMED_OUT = "timed_out"    # Killed after timeout_ms
    KILLED = "killed"          # Killed by aclose()


@dataclass
class ExecStats:
    started_at: datetime
    pid: int | None = None
    stopped_at: datetime | None = None
    exit_status: int | None = None


@dataclass
class _Run:
    proc: asyncio.subprocess.Process
    descriptor: InvocationDescriptor
    stats: ExecStats
    reported: bool = False


# ── Executor ───────────────────────────────────────────────────────

class AsyncExecutor:
    """
    Reference :class:`ProcessExecutor` on top of asyncio subprocesses.

    Every accepted run gets a watcher task which waits for exit (bounded by
    the descriptor's timeout, SIGKILL on expiry) and then fires the
    descriptor's callback from the event loop.
    """

    def __init__(self, base_env: dict[str, str] | None = None):
        self.base_env = base_env
        self._watchers: dict[asyncio.Task, _Run] = {}

    @property
    def in_flight(self) -> int:
        """Number of accepted runs whose callback has not fired yet."""
        return len(self._watchers)

    def running_pids(self) -> list[int]:
        return [r.stats.pid for r in self._watchers.values() if r.stats.pid is not None]

    async def start(self, descriptor: InvocationDescriptor) -> None:
        """
        Launch the descriptor's command.

        Raises:
            StartRejectedError: The process could not be spawned, or the
                command, arguments or environment are unusable (e.g. an
                embedded NUL byte).
        """
        what = descriptor.what or descriptor.command
        env = dict(os.environ if self.base_env is None else self.base_env)
        env.update(descriptor.env)
        stdio = asyncio.subprocess.DEVNULL if descriptor.suppress_stdio else None

        logger.debug("Starting %s (timeout %dms)", what, descriptor.timeout_ms)
        try:
            proc = await asyncio.create_subprocess_exec(
                descriptor.command,
                *descriptor.args[1:],
                env=env,
                stdin=stdio,
                stdout=stdio,
                stderr=stdio,
            )
        except (OSError, ValueError) as e:
            logger.error("Failed to start %s: %s", what, e)
            raise StartRejectedError(f"{what}: {e}") from e

        run = _Run(proc=proc, descriptor=descriptor, stats=ExecStats(started_at=now_local(), pid=proc.pid))
        logger.info("Started %s (PID %s)", what, proc.pid)

        task = asyncio.get_running_loop().create_task(self._watch(run), name=f"exec:{what}")
        self._watchers[task] = run
        task.add_done_callback(self._forget)

    def _forget(self, task: asyncio.Task) -> None:
        self._watchers.pop(task, None)
        if not task.cancelled() and task.exception() is not None:
            logger.error(
                "Completion callback for %s raised",
                task.get_name(),
                exc_info=task.exception(),
            )

    async def _watch(self, run: _Run) -> None:
        proc = run.proc
        what = run.descriptor.what or run.descriptor.command
        state = ExecState.RUNNING
        try:
            async with asyncio.timeout(run.descriptor.timeout_ms / 1000):
                await proc.wait()
            state = ExecState.EXITED
        except TimeoutError:
            logger.error("killing execution of %s because of timeout", what)
            state = ExecState.TIMED_OUT
            await self._kill(proc)
        except asyncio.CancelledError:
            logger.warning("Execution of %s cancelled, killing PID %s", what, proc.pid)
            state = ExecState.KILLED
            await self._kill(proc)

        if state is ExecState.TIMED_OUT:
            status = TIMEOUT_STATUS
        else:
            status = proc.returncode if proc.returncode is not None else TIMEOUT_STATUS
        self._report(run, status, state)

    def _report(self, run: _Run, status: int, state: ExecState) -> None:
        """Record the final status and fire the callback; at most once per run."""
        if run.reported:
            return
        run.reported = True
        what = run.descriptor.what or run.descriptor.command

        run.stats.stopped_at = now_local()
        run.stats.exit_status = status
        if status:
            logger.error("%s failed with status %s (%s)", what, status, state.value)
        else:
            logger.debug("%s exited cleanly", what)

        run.descriptor.callback(status)

    @staticmethod
    async def _kill(proc: asyncio.subprocess.Process) -> None:
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
        await proc.wait()

    async def aclose(self) -> None:
        """Kill every in-flight run; their callbacks still fire once each."""
        runs = dict(self._watchers)
        for task in runs:
            task.cancel()
        if runs:
            await asyncio.gather(*runs, return_exceptions=True)

        # A watcher cancelled before its first step never ran its handler
        for run in runs.values():
            if run.reported:
                continue
            logger.warning(
                "Execution of %s closed before it was watched, killing PID %s",
                run.descriptor.what or run.descriptor.command, run.proc.pid,
            )
            await self._kill(run.proc)
            status = run.proc.returncode if run.proc.returncode is not None else TIMEOUT_STATUS
            try:
                self._report(run, status, ExecState.KILLED)
            except Exception:
                logger.exception("Completion callback for %s raised", run.descriptor.what)
