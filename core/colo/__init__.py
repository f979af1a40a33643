# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0
"""
COLO network device handling.

Brings the COLO proxy agent script up and down for each guest nic around
a checkpoint cycle, on either side of a replicated pair.
"""

from __future__ import annotations

from core.colo.controller import NicLifecycleController
from core.colo.invocation import build_invocation
from core.colo.models import (
    CheckpointDevice,
    CheckpointSession,
    ControllerState,
    DeviceKind,
    DeviceRecord,
    FailureCause,
    Mode,
    NicDevice,
    NicType,
    Operation,
    Outcome,
)
from core.colo.modes import (
    DeviceOps,
    colo_restore_device_nic,
    colo_save_device_nic,
    lookup_device_ops,
    primary_setup,
    primary_teardown,
    secondary_setup,
    secondary_teardown,
)
from core.colo.naming import resolve_interface_name
from core.colo.verifier import verify_setup

__all__ = [
    "CheckpointDevice",
    "CheckpointSession",
    "ControllerState",
    "DeviceKind",
    "DeviceOps",
    "DeviceRecord",
    "FailureCause",
    "Mode",
    "NicDevice",
    "NicLifecycleController",
    "NicType",
    "Operation",
    "Outcome",
    "build_invocation",
    "colo_restore_device_nic",
    "colo_save_device_nic",
    "lookup_device_ops",
    "primary_setup",
    "primary_teardown",
    "resolve_interface_name",
    "secondary_setup",
    "secondary_teardown",
    "verify_setup",
]
