"""Command line interface for drawsync.

Usage:
    drawsync new
    drawsync watch
    drawsync sync [<drawing>] [--dry-run]
    drawsync render <drawing>
"""

import argparse
import logging
import sys
from logging.handlers import RotatingFileHandler

from drawsync import __version__
from drawsync.cli.drawing import cmd_new, cmd_render
from drawsync.cli.sync import cmd_sync
from drawsync.cli.watch import cmd_watch
from drawsync.config import Settings, load_settings
from drawsync.errors import ConfigurationError

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(settings: Settings) -> None:
    """Console logging always; rotating file log when log_file is set."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    if settings.log_file:
        try:
            settings.log_file.parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(
                settings.log_file,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backups,
                encoding="utf-8",
            )
            fh.setLevel(level)
            fh.setFormatter(logging.Formatter(LOG_FORMAT))
            logging.getLogger().addHandler(fh)
        except OSError:
            logging.exception("Failed to set up file logging")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drawsync",
        description="Keep drawings, rendered images and documents in sync",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config", default=None,
        help="Path to config.yaml (default: $DRAWSYNC_CONFIG or ~/.config/drawsync/config.yaml)",
    )
    parser.add_argument(
        "--log-level", default=None,
        help="Logging level (DEBUG, INFO, WARNING, ...)",
    )
    parser.add_argument("--drawing-dir", default=None, help="Drawing directory")
    parser.add_argument("--image-dir", default=None, help="Rendered image directory")
    parser.add_argument("--document-dir", default=None, help="Companion document directory")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("new", help="Create a new drawing and open it")

    sub.add_parser("watch", help="Watch the drawing directory and sync on change")

    sync = sub.add_parser(
        "sync", help="Copy drawing content into companion documents now",
    )
    sync.add_argument(
        "drawing", nargs="?", default=None,
        help="Drawing to sync (default: every drawing)",
    )
    sync.add_argument(
        "--dry-run", action="store_true",
        help="Report changes without writing",
    )

    render = sub.add_parser("render", help="Request a render for one drawing")
    render.add_argument("drawing", help="Path to the .drawing file")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        args.settings = load_settings(
            args.config,
            log_level=args.log_level,
            drawing_dir=args.drawing_dir,
            image_dir=args.image_dir,
            document_dir=args.document_dir,
        )
    except ConfigurationError as e:
        print(f"ERROR: {e}")
        return 1

    configure_logging(args.settings)

    dispatch = {
        "new": cmd_new,
        "watch": cmd_watch,
        "sync": cmd_sync,
        "render": cmd_render,
    }
    return dispatch[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
