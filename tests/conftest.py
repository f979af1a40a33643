# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0
"""Global test fixtures for VifColo tests.

Provides filesystem isolation, config cache management and ready-made
checkpoint sessions backed by an in-memory store.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import pytest
import structlog

from core.colo.models import (
    CheckpointDevice,
    CheckpointSession,
    DeviceKind,
    NicDevice,
    NicType,
    Outcome,
)
from core.store.memory import MemoryStore
from tests.helpers.filesystem import create_test_data_dir
from tests.helpers.mocks import FakeExecutor

logger = logging.getLogger(__name__)


# ── Fixtures ──────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Keep structlog contextvars from leaking between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create an isolated VifColo runtime data directory.

    - Redirects ``VIFCOLO_DATA_DIR`` to a temp directory
    - Invalidates the config cache before and after the test
    """
    from core.config import invalidate_cache

    d = create_test_data_dir(tmp_path)
    monkeypatch.setenv("VIFCOLO_DATA_DIR", str(d))
    invalidate_cache()

    yield d

    invalidate_cache()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor(exit_status=0)


@pytest.fixture
def session(store: MemoryStore, executor: FakeExecutor) -> CheckpointSession:
    """Session for domain 3 running ``/agents/colo.sh``."""
    return CheckpointSession(
        domid=3,
        agent_script="/agents/colo.sh",
        store=store,
        executor=executor,
        hotplug_timeout_ms=40_000,
    )


@pytest.fixture
def delivered() -> list[tuple[CheckpointDevice, Outcome]]:
    """Collects every (device, outcome) pair handed to the orchestrator."""
    return []


@pytest.fixture
def make_device(
    session: CheckpointSession,
    delivered: list[tuple[CheckpointDevice, Outcome]],
) -> Callable[..., CheckpointDevice]:
    """Factory fixture for nic device slots wired to ``delivered``."""

    def _make(
        devid: int = 7,
        forwarddev: str | None = "eth0",
        nictype: NicType = NicType.VIF,
    ) -> CheckpointDevice:
        return CheckpointDevice(
            kind=DeviceKind.VIF,
            backend_dev=NicDevice(devid=devid, nictype=nictype, forwarddev=forwarddev),
            session=session,
            callback=lambda dev, outcome: delivered.append((dev, outcome)),
        )

    return _make
