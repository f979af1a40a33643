# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0

"""Post-setup verification against the agent status record."""

from __future__ import annotations

import logging

from core.colo.models import FailureCause, Outcome
from core.exceptions import StoreReadError
from core.paths import hotplug_error_path
from core.store.base import KeyValueStore

logger = logging.getLogger(__name__)


async def verify_setup(
    store: KeyValueStore,
    vm_id: int,
    device_id: int,
    exit_status: int,
    *,
    what: str = "",
    vif: str | None = None,
) -> Outcome:
    """Combine the status record and the exit status into a verdict.

    The status record is checked first: the infrastructure may report a
    failure even though the script itself exited 0.
    """
    path = hotplug_error_path(vm_id, device_id)
    try:
        hotplug_error = await store.read(path)
    except StoreReadError as e:
        logger.error("Cannot read %s: %s", path, e)
        return Outcome.failure(FailureCause.STORE_READ, str(e))

    if hotplug_error is not None:
        logger.error(
            "colo_agent script %s setup failed for vif %s: %s",
            what, vif, hotplug_error,
        )
        return Outcome.failure(FailureCause.INFRASTRUCTURE, hotplug_error)

    if exit_status:
        return Outcome.failure(
            FailureCause.PROCESS_EXIT, f"exit status {exit_status}",
        )

    return Outcome.success()
