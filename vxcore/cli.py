from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .cli_parser import build_main_parser
from .config_manager import ConfigManager, set_test_mode
from .errors import VxCoreError
from .logging_utils import setup_logging

log = logging.getLogger(__name__)


def _exists(path: Path | None) -> bool:
    if path is None:
        return False
    try:
        return path.exists()
    except OSError:
        return False


def _write_section(title: str, path: Path | None, contents: dict | None) -> None:
    exists = _exists(path)
    sys.stdout.write(f"{title} Path:\n  {path if path is not None else '(unresolved)'}\n")
    sys.stdout.write(f"  Exists: {'yes' if exists else 'no'}\n\n")
    if contents is not None and exists:
        sys.stdout.write(f"{title} Contents:\n{json.dumps(contents, indent=2)}\n\n")


def cmd_config_dump(args: argparse.Namespace) -> int:
    mgr = ConfigManager()
    try:
        mgr.load_configs()
    except VxCoreError as e:
        sys.stderr.write(f"Error: {e}\n")
        return 1

    show_contents = not args.paths_only
    sys.stdout.write("=== VxCore Configuration ===\n\n")
    _write_section(
        "App Config",
        mgr.config_path,
        mgr.config.to_dict() if show_contents else None,
    )
    _write_section(
        "Session Config",
        mgr.session_config_path,
        mgr.session_config.to_dict(mgr.record_codec) if show_contents else None,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_main_parser(handlers={"cmd_config_dump": cmd_config_dump})
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file, log_format=args.log_format)
    if args.test_mode:
        set_test_mode(True)

    rc = int(args.func(args))
    log.info("command complete cmd=%s rc=%d", str(getattr(args, "cmd", "")), int(rc))
    return rc


if __name__ == "__main__":
    raise SystemExit(main())
