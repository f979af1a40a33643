# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of VifColo core, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Lifecycle controller for one COLO nic device operation.

Setup runs ``resolving -> building -> invoking -> verifying -> completed``,
teardown runs ``building -> invoking -> completed``.  The controller
suspends at ``invoking`` on a future that the executor's exit callback
resolves; nothing blocks the event loop.

Every path ends in :meth:`NicLifecycleController._complete`, which hands
the Outcome to the orchestrator callback exactly once.

Precondition (not enforced): the orchestrator does not start a device's
teardown before that device's setup has completed.
"""

from __future__ import annotations

import asyncio
import logging

from core.colo.invocation import build_invocation
from core.colo.models import (
    CheckpointDevice,
    ControllerState,
    DeviceRecord,
    FailureCause,
    Mode,
    Operation,
    Outcome,
)
from core.colo.naming import resolve_interface_name
from core.colo.verifier import verify_setup
from core.exceptions import (
    ContinuationError,
    StartRejectedError,
    StoreReadError,
    ValidationError,
)
from core.logging_config import bind_device_context, clear_device_context
from core.supervisor.async_exec import InvocationDescriptor

logger = logging.getLogger(__name__)


class NicLifecycleController:
    """
    Drives one setup or teardown of the agent script for one nic.

    A controller instance is single-use: create a fresh one per operation.
    """

    def __init__(self, device: CheckpointDevice):
        self.device = device
        self.state = ControllerState.IDLE
        self._exit_status: asyncio.Future[int] | None = None
        self._accepted = False

    # ── Public operations ──────────────────────────────────────────

    async def setup(self, mode: Mode, script_path: str) -> Outcome:
        """Attach the failover agent to the nic and verify it came up."""
        self._begin(Operation.SETUP)
        dev = self.device
        nic = dev.backend_dev
        session = dev.session

        # There are no nic subkinds, so this handler always owns nic
        # devices; the claim stands even if validation fails below.
        dev.matched = True

        bind_device_context(session.domid, nic.devid, mode.value)
        try:
            if not nic.forwarddev:
                return self._complete(Outcome.failure(
                    FailureCause.VALIDATION,
                    f"nic {nic.devid}: no forward device configured",
                ))

            self._enter(ControllerState.RESOLVING)
            try:
                vif = await resolve_interface_name(
                    session.store, session.domid, nic.devid, nic.nictype,
                )
            except StoreReadError as e:
                return self._complete(Outcome.failure(FailureCause.STORE_READ, str(e)))

            record = DeviceRecord(devid=nic.devid, forward_device=nic.forwarddev, vif=vif)
            dev.nic = record

            self._enter(ControllerState.BUILDING)
            try:
                descriptor = self._build(record, mode, Operation.SETUP, script_path)
            except ValidationError as e:
                return self._complete(Outcome.failure(FailureCause.VALIDATION, str(e)))

            try:
                status = await self._invoke(descriptor)
            except StartRejectedError as e:
                return self._complete(Outcome.failure(FailureCause.START_REJECTED, str(e)))

            self._enter(ControllerState.VERIFYING)
            outcome = await verify_setup(
                session.store, session.domid, nic.devid, status,
                what=descriptor.args[0], vif=record.vif,
            )
            return self._complete(outcome)
        except Exception as e:
            self._fail_unexpected(e)
            raise
        finally:
            # Nothing was started, so there is nothing for teardown to undo
            if not self._accepted:
                dev.nic = None
            clear_device_context()

    async def teardown(self, mode: Mode, script_path: str) -> Outcome:
        """Detach the failover agent; judged on exit status alone."""
        self._begin(Operation.TEARDOWN)
        dev = self.device
        nic = dev.backend_dev
        session = dev.session

        # Without a setup record there is no vif name and the build fails
        record = dev.nic or DeviceRecord(devid=nic.devid, forward_device=nic.forwarddev)

        bind_device_context(session.domid, nic.devid, mode.value)
        try:
            self._enter(ControllerState.BUILDING)
            try:
                descriptor = self._build(record, mode, Operation.TEARDOWN, script_path)
            except ValidationError as e:
                return self._complete(Outcome.failure(FailureCause.VALIDATION, str(e)))

            try:
                status = await self._invoke(descriptor)
            except StartRejectedError as e:
                return self._complete(Outcome.failure(FailureCause.START_REJECTED, str(e)))

            if status:
                outcome = Outcome.failure(FailureCause.PROCESS_EXIT, f"exit status {status}")
            else:
                outcome = Outcome.success()
            return self._complete(outcome)
        except Exception as e:
            self._fail_unexpected(e)
            raise
        finally:
            dev.nic = None
            clear_device_context()

    # ── State machine helpers ──────────────────────────────────────

    def _begin(self, operation: Operation) -> None:
        if self.state is not ControllerState.IDLE:
            raise RuntimeError(
                f"Cannot {operation.value} nic {self.device.backend_dev.devid} "
                f"in state {self.state.value}"
            )

    def _enter(self, state: ControllerState) -> None:
        logger.debug("nic %d: %s -> %s", self.device.backend_dev.devid, self.state.value, state.value)
        self.state = state

    def _build(
        self,
        record: DeviceRecord,
        mode: Mode,
        operation: Operation,
        script_path: str,
    ) -> InvocationDescriptor:
        session = self.device.session
        return build_invocation(
            record, mode, operation, script_path,
            vm_id=session.domid,
            timeout_ms=session.hotplug_timeout_ms,
            callback=self._on_exit,
        )

    async def _invoke(self, descriptor: InvocationDescriptor) -> int:
        """Start the script and wait for the executor to report its exit."""
        self._enter(ControllerState.INVOKING)
        self._exit_status = asyncio.get_running_loop().create_future()
        await self.device.session.executor.start(descriptor)
        self._accepted = True
        return await self._exit_status

    def _on_exit(self, status: int) -> None:
        """Executor continuation; must fire exactly once per accepted start."""
        fut = self._exit_status
        if fut is None:
            raise ContinuationError(
                f"nic {self.device.backend_dev.devid}: exit reported before start"
            )
        if fut.cancelled():
            logger.warning(
                "nic %d: exit status %s arrived after the operation was cancelled",
                self.device.backend_dev.devid, status,
            )
            return
        if fut.done():
            raise ContinuationError(
                f"nic {self.device.backend_dev.devid}: exit reported twice"
            )
        fut.set_result(status)

    def _fail_unexpected(self, exc: Exception) -> None:
        """Deliver a failure for an error no other path handled, unless already delivered."""
        if self.state is ControllerState.COMPLETED:
            return
        logger.exception(
            "nic %d: unexpected error in state %s",
            self.device.backend_dev.devid, self.state.value,
        )
        self._complete(Outcome.failure(FailureCause.INTERNAL, f"{type(exc).__name__}: {exc}"))

    def _complete(self, outcome: Outcome) -> Outcome:
        dev = self.device
        if self.state is ControllerState.COMPLETED:
            raise ContinuationError(f"nic {dev.backend_dev.devid}: completed twice")
        self._enter(ControllerState.COMPLETED)
        dev.outcome = outcome

        if outcome.ok:
            logger.info("nic %d: %s", dev.backend_dev.devid, outcome)
        else:
            logger.error("nic %d failed: %s", dev.backend_dev.devid, outcome)

        dev.callback(dev, outcome)
        return outcome
