# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of VifColo core, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Agent script invocation builder.

The agent script is called as ``<script> setup|teardown`` and reads its
parameters from the environment:

    vifname      backend interface to attach the proxy to
    XENBUS_PATH  /libxl/<domid>/colo_agent/<devid>, where it reports errors
    forwarddev   physical nic that forwards traffic to the peer host
    mode         primary | secondary
    vmid         domain id
"""

from __future__ import annotations

from core.colo.models import DeviceRecord, Mode, Operation
from core.exceptions import ValidationError
from core.paths import colo_agent_path
from core.supervisor.async_exec import ExitCallback, InvocationDescriptor

ENV_KEYS = ("vifname", "XENBUS_PATH", "forwarddev", "mode", "vmid")


def build_invocation(
    record: DeviceRecord,
    mode: Mode,
    operation: Operation,
    script_path: str,
    *,
    vm_id: int,
    timeout_ms: int,
    callback: ExitCallback,
) -> InvocationDescriptor:
    """Describe one run of the agent script for *record*.

    Raises:
        ValidationError: The forward device or the interface name is
            missing; no process must be started.
    """
    if not record.forward_device:
        raise ValidationError(f"nic {record.devid}: no forward device configured")
    if not record.vif:
        raise ValidationError(f"nic {record.devid}: no backend interface name")

    env = (
        ("vifname", record.vif),
        ("XENBUS_PATH", colo_agent_path(vm_id, record.devid)),
        ("forwarddev", record.forward_device),
        ("mode", mode.value),
        ("vmid", str(vm_id)),
    )
    args = (script_path, operation.value)

    return InvocationDescriptor(
        command=script_path,
        args=args,
        env=env,
        timeout_ms=timeout_ms,
        callback=callback,
        what=" ".join(args),
        suppress_stdio=True,
    )
