"""Unit tests for core/colo/verifier.py: setup verdict from status record + exit."""
# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import pytest

from core.colo.models import FailureCause, Outcome
from core.colo.verifier import verify_setup
from core.store.memory import MemoryStore

STATUS_PATH = "/libxl/3/colo_agent/7/hotplug-error"


class TestVerifySetup:
    @pytest.mark.asyncio
    async def test_clean_exit_without_record_succeeds(self):
        outcome = await verify_setup(MemoryStore(), 3, 7, 0)
        assert outcome == Outcome.success()

    @pytest.mark.asyncio
    async def test_record_beats_clean_exit(self):
        store = MemoryStore({STATUS_PATH: "link down"})

        outcome = await verify_setup(store, 3, 7, 0)

        assert outcome.ok is False
        assert outcome.cause is FailureCause.INFRASTRUCTURE
        assert outcome.message == "link down"

    @pytest.mark.asyncio
    async def test_record_beats_nonzero_exit(self):
        store = MemoryStore({STATUS_PATH: "proxy module missing"})

        outcome = await verify_setup(store, 3, 7, 1)

        assert outcome.cause is FailureCause.INFRASTRUCTURE

    @pytest.mark.asyncio
    async def test_empty_record_still_counts_as_present(self):
        store = MemoryStore({STATUS_PATH: ""})

        outcome = await verify_setup(store, 3, 7, 0)

        assert outcome.cause is FailureCause.INFRASTRUCTURE

    @pytest.mark.asyncio
    async def test_nonzero_exit_without_record(self):
        outcome = await verify_setup(MemoryStore(), 3, 7, 2)

        assert outcome.cause is FailureCause.PROCESS_EXIT

    @pytest.mark.asyncio
    async def test_store_failure_beats_everything(self):
        store = MemoryStore({STATUS_PATH: "link down"})
        store.set_unreachable()

        for status in (0, 1):
            outcome = await verify_setup(store, 3, 7, status)
            assert outcome.cause is FailureCause.STORE_READ

    @pytest.mark.asyncio
    async def test_record_of_other_device_is_ignored(self):
        store = MemoryStore({"/libxl/3/colo_agent/8/hotplug-error": "boom"})

        outcome = await verify_setup(store, 3, 7, 0)

        assert outcome.ok is True
