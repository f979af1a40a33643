# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0

"""Backend interface naming for guest nics."""

from __future__ import annotations

import logging

from core.colo.models import NicType
from core.paths import vifname_path
from core.store.base import KeyValueStore

logger = logging.getLogger(__name__)

_NETBACK_NIC_NAME = "vif{domid}.{devid}"
_TAP_DEVICE_SUFFIX = "-emu"


def default_nic_devname(domid: int, devid: int, nictype: NicType) -> str | None:
    """Name netback (or the emulator tap) gives the interface by default.

    Returns None for nic types that have no backend interface name.
    """
    base = _NETBACK_NIC_NAME.format(domid=domid, devid=devid)
    if nictype is NicType.VIF:
        return base
    if nictype is NicType.VIF_IOEMU:
        return base + _TAP_DEVICE_SUFFIX
    return None


async def resolve_interface_name(
    store: KeyValueStore,
    vm_id: int,
    device_id: int,
    device_kind: NicType,
) -> str | None:
    """Return the backend interface name the agent script must act on.

    An explicit ``vifname`` recorded for the device wins over the
    synthesized ``vifX.Y`` name.  Only valid for the checkpoint agent:
    with driver domains the recorded name is guest-controlled.

    Raises:
        StoreReadError: The store could not be read.  A missing node is
            not an error and selects the default name.
    """
    name = await store.read(vifname_path(vm_id, device_id))
    if name is None:
        name = default_nic_devname(vm_id, device_id, device_kind)
        logger.debug("No vifname recorded for %d/%d, using %s", vm_id, device_id, name)
    return name
