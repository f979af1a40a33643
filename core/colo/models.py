# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of VifColo core, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Data model shared by the COLO nic lifecycle modules."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.store.base import KeyValueStore
    from core.supervisor.async_exec import ProcessExecutor

# Generic failure return code of the checkpoint device protocol
ERROR_FAIL = -3


class Mode(Enum):
    """Side of the replicated pair."""
    PRIMARY = "primary"        # checkpoint source (save side)
    SECONDARY = "secondary"    # checkpoint sink (restore side)


class Operation(Enum):
    SETUP = "setup"
    TEARDOWN = "teardown"


class DeviceKind(Enum):
    VIF = "vif"
    VBD = "vbd"


class NicType(Enum):
    VIF = "vif"
    VIF_IOEMU = "vif_ioemu"


class ControllerState(Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    BUILDING = "building"
    INVOKING = "invoking"
    VERIFYING = "verifying"
    COMPLETED = "completed"


class FailureCause(Enum):
    VALIDATION = "validation"            # never attempted
    START_REJECTED = "start_rejected"    # executor refused to launch
    PROCESS_EXIT = "process_exit"        # non-zero exit or timeout
    STORE_READ = "store_read"            # store unreachable/malformed
    INFRASTRUCTURE = "infrastructure"    # status record present
    INTERNAL = "internal"                # unexpected error in a collaborator


# ── Devices ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class NicDevice:
    """Backend descriptor of one guest network interface."""

    devid: int
    nictype: NicType = NicType.VIF
    forwarddev: str | None = None


@dataclass(frozen=True)
class DeviceRecord:
    """What one setup learned about a nic; reused by the paired teardown."""

    devid: int
    forward_device: str | None
    vif: str | None = None


# ── Outcome ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Outcome:
    ok: bool
    cause: FailureCause | None = None
    message: str | None = None

    @classmethod
    def success(cls) -> Outcome:
        return cls(ok=True)

    @classmethod
    def failure(cls, cause: FailureCause, message: str | None = None) -> Outcome:
        return cls(ok=False, cause=cause, message=message)

    @property
    def rc(self) -> int:
        """Numeric form: 0 on success, ``ERROR_FAIL`` otherwise."""
        return 0 if self.ok else ERROR_FAIL

    def __str__(self) -> str:
        if self.ok:
            return "success"
        if self.message:
            return f"{self.cause.value}: {self.message}"
        return self.cause.value


# ── Checkpoint session / device slots ──────────────────────────────


@dataclass
class CheckpointSession:
    """Per-domain context one side of a checkpoint cycle runs in.

    A primary (save) session and a secondary (restore) session have the
    same shape; they are told apart by the entry points they are passed to.
    """

    domid: int
    agent_script: str
    store: KeyValueStore
    executor: ProcessExecutor
    hotplug_timeout_ms: int


DeviceCallback = Callable[["CheckpointDevice", Outcome], None]


@dataclass
class CheckpointDevice:
    """Orchestrator-owned slot for one device of a checkpoint cycle.

    ``matched`` is set by whichever handler claims the device.  ``nic`` is
    filled in by setup and read back by teardown.
    """

    kind: DeviceKind
    backend_dev: NicDevice
    session: CheckpointSession
    callback: DeviceCallback
    matched: bool = False
    outcome: Outcome | None = None
    nic: DeviceRecord | None = None
