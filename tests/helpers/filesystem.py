# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0
"""Filesystem scaffolding helpers for tests.

Creates isolated VifColo runtime data directories and throwaway agent
scripts so that each test runs against its own temporary filesystem.
"""

from __future__ import annotations

import json
import stat
from pathlib import Path
from typing import Any

# Minimal valid config.json for tests.
DEFAULT_TEST_CONFIG: dict[str, Any] = {
    "version": 1,
    "system": {"log_level": "DEBUG", "json_log_file": False},
    "colo": {"hotplug_timeout_s": 5},
    "store": {"backend": "memory", "seed": {}},
}


def create_test_data_dir(base: Path, config: dict[str, Any] | None = None) -> Path:
    """Create the ``~/.vifcolo/``-like directory tree under *base*.

    Returns the data directory path (``base / ".vifcolo"``).
    """
    data_dir = base / ".vifcolo"
    data_dir.mkdir()
    (data_dir / "logs").mkdir()

    write_config(data_dir, config or DEFAULT_TEST_CONFIG)
    return data_dir


def write_config(data_dir: Path, config: dict[str, Any]) -> Path:
    config_path = data_dir / "config.json"
    config_path.write_text(
        json.dumps(config, indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    return config_path


def write_script(path: Path, body: str) -> Path:
    """Write an executable ``/bin/sh`` script and return its path."""
    path.write_text("#!/bin/sh\n" + body, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path
