from __future__ import annotations

import argparse
from typing import Any


def _handler(handlers: dict[str, Any], key: str) -> Any:
    fn = handlers.get(key)
    if fn is None:
        raise KeyError(f"missing parser handler: {key}")
    return fn


def build_main_parser(*, handlers: dict[str, Any]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vxcore")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (debug, info, warning, error). You can also set VXCORE_LOG_LEVEL.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Optional log file path. You can also set VXCORE_LOG_FILE.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["text", "jsonl"],
        help="Log format (text or jsonl). You can also set VXCORE_LOG_FORMAT.",
    )
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Keep config and session in a temporary sandbox dir. You can also set VXCORE_TEST_MODE.",
    )

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_cfg = sub.add_parser("config", help="Config utilities.")
    sub_cfg = p_cfg.add_subparsers(dest="cfg_cmd", required=True)
    p_dump = sub_cfg.add_parser("dump", help="Dump config and session paths and contents.")
    p_dump.add_argument("--paths-only", action="store_true", help="Show only file paths.")
    p_dump.set_defaults(func=_handler(handlers, "cmd_config_dump"))

    return parser
