# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of VifColo core, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Centralized path resolution for VifColo.

Covers two namespaces: the local runtime data directory (config, logs) and
the xenstore paths the agent script and its infrastructure share with us.
Runtime data directory can be overridden via VIFCOLO_DATA_DIR environment variable.
"""

from __future__ import annotations

import os
from pathlib import Path

# Default runtime data directory
_DEFAULT_DATA_DIR = Path.home() / ".vifcolo"

# Xen installs hotplug and agent scripts here
DEFAULT_SCRIPT_DIR = Path("/etc/xen/scripts")
DEFAULT_AGENT_SCRIPT_NAME = "colo-proxy-setup"

# Backend domain for vif devices (driver domains are not supported)
BACKEND_DOMID = 0


def get_data_dir() -> Path:
    """Return the runtime data directory, respecting VIFCOLO_DATA_DIR env var."""
    env_val = os.environ.get("VIFCOLO_DATA_DIR")
    if env_val:
        return Path(env_val).expanduser().resolve()
    return _DEFAULT_DATA_DIR


def get_log_dir() -> Path:
    return get_data_dir() / "logs"


# --- Store paths ---


def dom_path(domid: int) -> str:
    """Return the xenstore home of *domid*: ``/local/domain/<domid>``."""
    return f"/local/domain/{domid}"


def libxl_path(domid: int) -> str:
    """Return the toolstack-private subtree for *domid*: ``/libxl/<domid>``."""
    return f"/libxl/{domid}"


def vifname_path(domid: int, devid: int) -> str:
    """Path holding an explicitly assigned interface name for a vif."""
    return f"{dom_path(BACKEND_DOMID)}/backend/vif/{domid}/{devid}/vifname"


def colo_agent_path(domid: int, devid: int) -> str:
    """Per-device subtree handed to the agent script as ``XENBUS_PATH``."""
    return f"{libxl_path(domid)}/colo_agent/{devid}"


def hotplug_error_path(domid: int, devid: int) -> str:
    """Status record the agent infrastructure writes on failure."""
    return f"{colo_agent_path(domid, devid)}/hotplug-error"
