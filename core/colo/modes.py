# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0

"""Primary / secondary entry points handed to the checkpoint orchestrator.

The orchestrator selects a :class:`DeviceOps` record by device kind and
calls its ``setup`` / ``teardown`` with a :class:`CheckpointDevice`; the
mode and agent script are fixed by the record and the device's session.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from core.colo.controller import NicLifecycleController
from core.colo.models import CheckpointDevice, CheckpointSession, DeviceKind, Mode, Outcome

DeviceOp = Callable[[CheckpointDevice], Awaitable[Outcome]]


def init_subkind_colo_nic(session: CheckpointSession) -> None:
    """Nic devices need no per-session preparation."""


def cleanup_subkind_colo_nic(session: CheckpointSession) -> None:
    pass


@dataclass(frozen=True)
class DeviceOps:
    """Capabilities a device handler offers for one device kind."""

    kind: DeviceKind
    setup: DeviceOp
    teardown: DeviceOp
    init: Callable[[CheckpointSession], None] = init_subkind_colo_nic
    cleanup: Callable[[CheckpointSession], None] = cleanup_subkind_colo_nic


# ======== primary ========

async def primary_setup(dev: CheckpointDevice) -> Outcome:
    return await NicLifecycleController(dev).setup(Mode.PRIMARY, dev.session.agent_script)


async def primary_teardown(dev: CheckpointDevice) -> Outcome:
    return await NicLifecycleController(dev).teardown(Mode.PRIMARY, dev.session.agent_script)


colo_save_device_nic = DeviceOps(
    kind=DeviceKind.VIF,
    setup=primary_setup,
    teardown=primary_teardown,
)


# ======== secondary ========

async def secondary_setup(dev: CheckpointDevice) -> Outcome:
    return await NicLifecycleController(dev).setup(Mode.SECONDARY, dev.session.agent_script)


async def secondary_teardown(dev: CheckpointDevice) -> Outcome:
    return await NicLifecycleController(dev).teardown(Mode.SECONDARY, dev.session.agent_script)


colo_restore_device_nic = DeviceOps(
    kind=DeviceKind.VIF,
    setup=secondary_setup,
    teardown=secondary_teardown,
)


_DEVICE_OPS: dict[Mode, tuple[DeviceOps, ...]] = {
    Mode.PRIMARY: (colo_save_device_nic,),
    Mode.SECONDARY: (colo_restore_device_nic,),
}


def lookup_device_ops(mode: Mode, kind: DeviceKind) -> DeviceOps | None:
    """Return the handler for *kind* on the *mode* side, or None if unhandled."""
    for ops in _DEVICE_OPS[mode]:
        if ops.kind is kind:
            return ops
    return None
