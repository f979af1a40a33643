"""CLI commands for running the COLO agent script on a single nic."""

# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from core.colo.models import (
    CheckpointDevice,
    CheckpointSession,
    DeviceKind,
    DeviceRecord,
    Mode,
    NicDevice,
    NicType,
    Outcome,
)
from core.colo.modes import lookup_device_ops

logger = logging.getLogger(__name__)


def register(sub: argparse._SubParsersAction) -> None:
    """Add the ``nic`` command group to the top-level parser."""
    p_nic = sub.add_parser("nic", help="Set up or tear down the COLO agent for one nic")
    nic_sub = p_nic.add_subparsers(dest="nic_command")

    for op in ("setup", "teardown"):
        p = nic_sub.add_parser(op, help=f"Run the agent script {op} for one nic")
        p.add_argument(
            "--mode", required=True, choices=[m.value for m in Mode],
            help="Side of the replicated pair",
        )
        p.add_argument("--domid", type=int, required=True, help="Domain id")
        p.add_argument("--devid", type=int, required=True, help="Nic device id")
        p.add_argument(
            "--forwarddev", required=True,
            help="Physical nic forwarding traffic to the peer host",
        )
        p.add_argument(
            "--nictype", default=NicType.VIF.value, choices=[t.value for t in NicType],
        )
        p.add_argument(
            "--vifname", default=None,
            help="Backend interface name (teardown only; default: resolve from store)",
        )
        p.add_argument(
            "--script", default=None,
            help="Agent script path (default: from config)",
        )
        p.set_defaults(func=cmd_nic, nic_op=op)

    p_nic.set_defaults(func=lambda args: p_nic.print_help())


def cmd_nic(args: argparse.Namespace) -> None:
    """Run one setup or teardown and exit 0 on success, 1 on failure."""
    outcome = asyncio.run(run_nic_operation(args))
    if outcome.ok:
        print(f"nic {args.devid} {args.nic_op}: success")
        return
    print(f"nic {args.devid} {args.nic_op}: {outcome}", file=sys.stderr)
    sys.exit(1)


async def run_nic_operation(args: argparse.Namespace) -> Outcome:
    from core.colo.naming import resolve_interface_name
    from core.config import load_config, resolve_agent_script
    from core.exceptions import StoreReadError
    from core.store import create_store
    from core.supervisor import AsyncExecutor

    config = load_config()
    mode = Mode(args.mode)
    executor = AsyncExecutor()
    session = CheckpointSession(
        domid=args.domid,
        agent_script=resolve_agent_script(config, args.script),
        store=create_store(config.store),
        executor=executor,
        hotplug_timeout_ms=config.colo.hotplug_timeout_ms,
    )
    nic = NicDevice(
        devid=args.devid,
        nictype=NicType(args.nictype),
        forwarddev=args.forwarddev,
    )

    def _done(dev: CheckpointDevice, outcome: Outcome) -> None:
        logger.debug("nic %d delivered %s", dev.backend_dev.devid, outcome)

    dev = CheckpointDevice(
        kind=DeviceKind.VIF, backend_dev=nic, session=session, callback=_done,
    )
    ops = lookup_device_ops(mode, DeviceKind.VIF)

    try:
        if args.nic_op == "setup":
            return await ops.setup(dev)

        # A standalone teardown has no setup record to reuse
        vif = args.vifname
        if vif is None:
            try:
                vif = await resolve_interface_name(
                    session.store, args.domid, args.devid, nic.nictype,
                )
            except StoreReadError as e:
                logger.warning("Cannot resolve vif name for teardown: %s", e)
        dev.nic = DeviceRecord(devid=nic.devid, forward_device=nic.forwarddev, vif=vif)
        return await ops.teardown(dev)
    finally:
        await executor.aclose()
