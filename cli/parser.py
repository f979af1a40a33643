# VifColo - COLO network failover agent lifecycle
# Copyright (C) 2026 VifColo Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import argparse
import os
import sys


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vifcolo",
        description="VifColo - COLO network failover agent lifecycle",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Override runtime data directory (default: ~/.vifcolo or VIFCOLO_DATA_DIR)",
    )
    parser.add_argument(
        "--log-level", default=None,
        help="Log level (default: VIFCOLO_LOG_LEVEL or config system.log_level)",
    )
    sub = parser.add_subparsers(dest="command")

    # ── Nic ───────────────────────────────────────────────
    from cli.commands import nic

    nic.register(sub)

    # ── Config ────────────────────────────────────────────
    from core.config.cli import (
        cmd_config_dispatch,
        cmd_config_get,
        cmd_config_list,
        cmd_config_path,
        cmd_config_set,
    )

    p_config = sub.add_parser("config", help="Manage configuration")
    p_config.set_defaults(func=cmd_config_dispatch, config_parser=p_config)
    config_sub = p_config.add_subparsers(dest="config_command")

    p_cfg_get = config_sub.add_parser("get", help="Get a config value")
    p_cfg_get.add_argument("key", help="Dot-notation key (e.g. colo.hotplug_timeout_s)")
    p_cfg_get.set_defaults(func=cmd_config_get)

    p_cfg_set = config_sub.add_parser("set", help="Set a config value")
    p_cfg_set.add_argument("key", help="Dot-notation key")
    p_cfg_set.add_argument("value", help="Value to set")
    p_cfg_set.set_defaults(func=cmd_config_set)

    p_cfg_list = config_sub.add_parser("list", help="List all config values")
    p_cfg_list.add_argument("--section", default=None, help="Filter by section")
    p_cfg_list.set_defaults(func=cmd_config_list)

    p_cfg_path = config_sub.add_parser("path", help="Print the config file location")
    p_cfg_path.set_defaults(func=cmd_config_path)

    return parser


def cli_main(argv: list[str] | None = None) -> None:
    from dotenv import load_dotenv

    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    # Apply --data-dir override before any command
    if args.data_dir:
        os.environ["VIFCOLO_DATA_DIR"] = args.data_dir

    from core.config import load_config
    from core.exceptions import ConfigError
    from core.logging_config import setup_logging
    from core.paths import get_log_dir

    try:
        config = load_config()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    setup_logging(
        level=args.log_level or os.environ.get("VIFCOLO_LOG_LEVEL") or config.system.log_level,
        log_dir=get_log_dir(),
        json_file=config.system.json_log_file,
    )

    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()
