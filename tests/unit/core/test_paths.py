"""Unit tests for core/paths.py: data directory and store path helpers."""
# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pathlib import Path

from core.paths import (
    DEFAULT_AGENT_SCRIPT_NAME,
    DEFAULT_SCRIPT_DIR,
    colo_agent_path,
    dom_path,
    get_data_dir,
    get_log_dir,
    hotplug_error_path,
    libxl_path,
    vifname_path,
)


# ── get_data_dir ──────────────────────────────────────────


class TestGetDataDir:
    def test_default_is_home_vifcolo(self, monkeypatch):
        monkeypatch.delenv("VIFCOLO_DATA_DIR", raising=False)
        assert get_data_dir() == Path.home() / ".vifcolo"

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("VIFCOLO_DATA_DIR", str(tmp_path / "custom"))
        assert get_data_dir() == (tmp_path / "custom").resolve()

    def test_log_dir(self, monkeypatch, tmp_path):
        monkeypatch.setenv("VIFCOLO_DATA_DIR", str(tmp_path))
        assert get_log_dir() == tmp_path.resolve() / "logs"


# ── Store paths ───────────────────────────────────────────


class TestStorePaths:
    def test_domain_roots(self):
        assert dom_path(0) == "/local/domain/0"
        assert libxl_path(3) == "/libxl/3"

    def test_vifname_lives_under_backend(self):
        assert vifname_path(3, 7) == "/local/domain/0/backend/vif/3/7/vifname"

    def test_agent_subtree(self):
        assert colo_agent_path(3, 7) == "/libxl/3/colo_agent/7"
        assert hotplug_error_path(3, 7) == "/libxl/3/colo_agent/7/hotplug-error"

    def test_default_script(self):
        assert DEFAULT_SCRIPT_DIR / DEFAULT_AGENT_SCRIPT_NAME == Path(
            "/etc/xen/scripts/colo-proxy-setup"
        )
