"""Entry point for Storyboard TUI CLI."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .constants import APP_NAME, LOG_FILE, VERSION, storyboard_home
from .log import configure_logging, logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Storyboard TUI")
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"{APP_NAME} {VERSION}",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory for preferences and saved storyboards "
        "(default: $STORYBOARD_HOME or ~/.storyboard)",
    )
    parser.add_argument(
        "--import",
        dest="import_path",
        type=Path,
        default=None,
        metavar="FILE",
        help="Open a storyboard JSON file on startup",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Write debug records to the log file",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run Storyboard TUI."""
    args = build_parser().parse_args(argv)

    home = storyboard_home(args.data_dir)
    try:
        configure_logging(home / LOG_FILE, debug=args.debug)
    except OSError as exc:
        print(f"Cannot use data directory {home}: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.import_path is not None and not args.import_path.is_file():
        print(f"No such storyboard file: {args.import_path}", file=sys.stderr)
        sys.exit(2)

    try:
        from storyboard_tui.app import run_app

        run_app(data_dir=home, import_path=args.import_path)
    except (KeyboardInterrupt, SystemExit):
        pass
    except Exception:
        logger.debug("Fatal error in storyboard-tui", exc_info=True)
        import traceback

        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
