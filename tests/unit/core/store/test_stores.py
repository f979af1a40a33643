"""Unit tests for core/store: memory and xenstore-read backends."""
# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import asyncio
import os
from pathlib import Path

import pytest

from core.config.models import StoreConfig
from core.exceptions import StoreReadError
from core.store import KeyValueStore, MemoryStore, XenstoreStore, create_store
from tests.helpers.filesystem import write_script


class TestMemoryStore:
    @pytest.mark.asyncio
    async def test_read_present_and_absent(self):
        store = MemoryStore({"/a/b": "1"})

        assert await store.read("/a/b") == "1"
        assert await store.read("/a/c") is None

    @pytest.mark.asyncio
    async def test_set_and_remove(self):
        store = MemoryStore()
        store.set("/x", "y")
        assert await store.read("/x") == "y"

        store.remove("/x")
        assert await store.read("/x") is None

    @pytest.mark.asyncio
    async def test_unreachable(self):
        store = MemoryStore({"/x": "y"})
        store.set_unreachable()

        with pytest.raises(StoreReadError) as exc_info:
            await store.read("/x")
        assert exc_info.value.path == "/x"

    @pytest.mark.asyncio
    async def test_relative_path_is_malformed(self):
        with pytest.raises(StoreReadError, match="malformed"):
            await MemoryStore().read("libxl/3")

    def test_satisfies_protocol(self):
        assert isinstance(MemoryStore(), KeyValueStore)


@pytest.fixture
def fake_xenstore_read(tmp_path: Path) -> Path:
    """Stand-in for xenstore-read driven by the requested path.

    A read of ``/hang`` records the reader's pid in ``hang.pid`` first.
    """
    pidfile = tmp_path / "hang.pid"
    return write_script(
        tmp_path / "xenstore-read",
        'case "$1" in\n'
        '  /present) echo "vif-override" ;;\n'
        '  /empty) echo "" ;;\n'
        '  /missing) echo "xenstore-read: couldn\'t read path $1" >&2; exit 1 ;;\n'
        f'  /hang) echo $$ > {pidfile}; exec sleep 5 ;;\n'
        '  *) echo "xs_open: Connection refused" >&2; exit 1 ;;\n'
        'esac\n',
    )


class TestXenstoreStore:
    @pytest.mark.asyncio
    async def test_present_value_loses_trailing_newline(self, fake_xenstore_read):
        store = XenstoreStore(read_command=str(fake_xenstore_read))
        assert await store.read("/present") == "vif-override"

    @pytest.mark.asyncio
    async def test_empty_value_is_present(self, fake_xenstore_read):
        store = XenstoreStore(read_command=str(fake_xenstore_read))
        assert await store.read("/empty") == ""

    @pytest.mark.asyncio
    async def test_missing_node_is_none(self, fake_xenstore_read):
        store = XenstoreStore(read_command=str(fake_xenstore_read))
        assert await store.read("/missing") is None

    @pytest.mark.asyncio
    async def test_daemon_error_raises(self, fake_xenstore_read):
        store = XenstoreStore(read_command=str(fake_xenstore_read))

        with pytest.raises(StoreReadError, match="Connection refused"):
            await store.read("/other")

    @pytest.mark.asyncio
    async def test_hang_times_out(self, fake_xenstore_read):
        store = XenstoreStore(read_command=str(fake_xenstore_read), timeout=0.2)

        with pytest.raises(StoreReadError, match="timed out"):
            await store.read("/hang")

    @pytest.mark.asyncio
    async def test_cancelled_read_reaps_the_reader(self, fake_xenstore_read, tmp_path):
        store = XenstoreStore(read_command=str(fake_xenstore_read), timeout=30)
        pidfile = tmp_path / "hang.pid"

        task = asyncio.create_task(store.read("/hang"))
        for _ in range(500):
            if pidfile.exists() and pidfile.read_text().strip():
                break
            await asyncio.sleep(0.01)
        pid = int(pidfile.read_text())

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        with pytest.raises(ProcessLookupError):
            os.kill(pid, 0)

    @pytest.mark.asyncio
    async def test_nul_in_path_raises(self, fake_xenstore_read):
        store = XenstoreStore(read_command=str(fake_xenstore_read))

        with pytest.raises(StoreReadError, match="cannot run"):
            await store.read("/bad\x00path")

    @pytest.mark.asyncio
    async def test_missing_binary_raises(self, tmp_path):
        store = XenstoreStore(read_command=str(tmp_path / "nope"))

        with pytest.raises(StoreReadError, match="cannot run"):
            await store.read("/present")


class TestCreateStore:
    def test_memory_backend_is_seeded(self):
        store = create_store(StoreConfig(backend="memory", seed={"/a": "b"}))
        assert isinstance(store, MemoryStore)
        assert store.snapshot() == {"/a": "b"}

    def test_xenstore_backend(self):
        store = create_store(StoreConfig(read_command="/usr/bin/xenstore-read", read_timeout_s=2))
        assert isinstance(store, XenstoreStore)
        assert store.read_command == "/usr/bin/xenstore-read"
        assert store.timeout == 2
