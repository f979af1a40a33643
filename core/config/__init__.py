# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from core.config.models import (
    DEFAULT_HOTPLUG_TIMEOUT_S,
    ColoConfig,
    StoreConfig,
    SystemConfig,
    VifColoConfig,
    get_config_path,
    invalidate_cache,
    load_config,
    resolve_agent_script,
    save_config,
)
