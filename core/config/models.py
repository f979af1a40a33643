# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of VifColo core, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Central configuration module for VifColo.

Defines Pydantic models for config.json and provides
load / save / resolve helpers with a module-level singleton cache.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ValidationError, field_validator

from core.exceptions import ConfigValidationError
from core.paths import DEFAULT_AGENT_SCRIPT_NAME, DEFAULT_SCRIPT_DIR

logger = logging.getLogger("vifcolo.config")

# Upper bound for one hotplug-style script run, in seconds
DEFAULT_HOTPLUG_TIMEOUT_S = 40

# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class SystemConfig(BaseModel):
    log_level: str = "INFO"
    json_log_file: bool = True


class ColoConfig(BaseModel):
    """Agent script location and timing."""

    script_dir: str = str(DEFAULT_SCRIPT_DIR)
    agent_script: str | None = None  # None = <script_dir>/colo-proxy-setup
    hotplug_timeout_s: int = DEFAULT_HOTPLUG_TIMEOUT_S

    @field_validator("hotplug_timeout_s")
    @classmethod
    def _positive_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"hotplug_timeout_s must be positive, got {v}")
        return v

    @property
    def hotplug_timeout_ms(self) -> int:
        return self.hotplug_timeout_s * 1000


class StoreConfig(BaseModel):
    """Shared key-value store access."""

    backend: Literal["xenstore", "memory"] = "xenstore"
    read_command: str = "xenstore-read"
    read_timeout_s: float = 5.0
    # Seed values for the memory backend (path -> value)
    seed: dict[str, str] = {}


class VifColoConfig(BaseModel):
    version: int = 1
    system: SystemConfig = SystemConfig()
    colo: ColoConfig = ColoConfig()
    store: StoreConfig = StoreConfig()


# ---------------------------------------------------------------------------
# Singleton cache
# ---------------------------------------------------------------------------

_config: VifColoConfig | None = None
_config_path: Path | None = None
_config_mtime: float = 0.0


def invalidate_cache() -> None:
    """Reset the module-level singleton cache."""
    global _config, _config_path, _config_mtime
    _config = None
    _config_path = None
    _config_mtime = 0.0


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def get_config_path(data_dir: Path | None = None) -> Path:
    """Return the path to config.json inside *data_dir*.

    If *data_dir* is not given, it is resolved via ``core.paths.get_data_dir``.
    """
    if data_dir is None:
        from core.paths import get_data_dir

        data_dir = get_data_dir()
    return data_dir / "config.json"


# ---------------------------------------------------------------------------
# Load / Save
# ---------------------------------------------------------------------------


def load_config(path: Path | None = None) -> VifColoConfig:
    """Load configuration from disk, returning cached instance when possible.

    If *path* is ``None``, :func:`get_config_path` determines the location.
    When the file does not exist the default configuration is returned.

    The cache is automatically invalidated when the file's mtime changes,
    so manual edits are picked up between device operations.

    Raises:
        ConfigValidationError: The file is not valid JSON or does not
            match the schema.
    """
    global _config, _config_path, _config_mtime

    if path is None:
        path = get_config_path()

    if _config is not None and _config_path == path:
        try:
            disk_mtime = path.stat().st_mtime
        except OSError:
            disk_mtime = 0.0
        if disk_mtime == _config_mtime:
            return _config
        logger.debug("Config file changed on disk (mtime %.3f → %.3f); reloading", _config_mtime, disk_mtime)

    if path.is_file():
        logger.debug("Loading config from %s", path)
        try:
            data: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
            config = VifColoConfig.model_validate(data)
        except json.JSONDecodeError as exc:
            logger.error("Failed to parse %s: %s", path, exc)
            raise ConfigValidationError(f"Invalid JSON in {path}: {exc}") from exc
        except ValidationError as exc:
            logger.error("Invalid config in %s: %s", path, exc)
            raise ConfigValidationError(f"Invalid config in {path}: {exc}") from exc
    else:
        logger.info("Config file not found at %s; using defaults", path)
        config = VifColoConfig()

    _config = config
    _config_path = path
    try:
        _config_mtime = path.stat().st_mtime
    except OSError:
        _config_mtime = 0.0
    return config


def save_config(config: VifColoConfig, path: Path | None = None) -> None:
    """Persist *config* to disk as pretty-printed JSON (mode 0o600).

    Updates the module-level singleton cache so subsequent :func:`load_config`
    calls return the freshly saved config.
    """
    global _config, _config_path, _config_mtime

    if path is None:
        path = get_config_path()

    path.parent.mkdir(parents=True, exist_ok=True)

    payload = config.model_dump(mode="json")
    text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
    path.write_text(text, encoding="utf-8")
    os.chmod(path, 0o600)

    logger.debug("Config saved to %s", path)

    _config = config
    _config_path = path
    try:
        _config_mtime = path.stat().st_mtime
    except OSError:
        _config_mtime = 0.0


# ---------------------------------------------------------------------------
# Resolution helpers
# ---------------------------------------------------------------------------


def resolve_agent_script(config: VifColoConfig, override: str | None = None) -> str:
    """Pick the agent script path for a checkpoint session.

    Priority (strongest first):

      1. *override* (command line / orchestrator supplied)
      2. ``colo.agent_script`` in config.json
      3. ``<colo.script_dir>/colo-proxy-setup``
    """
    if override:
        return override
    if config.colo.agent_script:
        return config.colo.agent_script
    return str(Path(config.colo.script_dir) / DEFAULT_AGENT_SCRIPT_NAME)
