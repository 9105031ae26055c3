"""Sync CLI commands."""

import argparse

from drawsync.errors import DrawsyncError


def cmd_sync(args: argparse.Namespace) -> int:
    from drawsync.config import validate_dirs
    from drawsync.dispatcher import ChangeDispatcher

    try:
        validate_dirs(args.settings)
    except DrawsyncError as e:
        print(f"ERROR: {e}")
        return 1

    dispatcher = ChangeDispatcher(args.settings)

    if args.drawing:
        try:
            action = dispatcher.sync_drawing(args.drawing, dry_run=args.dry_run)
        except (DrawsyncError, OSError) as e:
            print(f"ERROR: {e}")
            return 1
        print(f"  {action}: {args.drawing}")
        if args.dry_run:
            print("\n[DRY RUN] No files were modified.")
        return 0

    result = dispatcher.sync_all(dry_run=args.dry_run)

    print("Drawing Sync Results")
    print("─" * 40)
    print(f"  Updated:   {len(result['updated'])}")
    print(f"  Unchanged: {len(result['unchanged'])}")
    print(f"  Skipped:   {len(result['skipped'])}")
    for s in result["skipped"]:
        print(f"    - {s['path']}: {s['reason']}")
    if result["errors"]:
        print(f"  Errors:    {len(result['errors'])}")
        for e in result["errors"]:
            print(f"    - {e['path']}: {e['error']}")

    if result.get("dry_run"):
        print("\n[DRY RUN] No files were modified.")

    return 1 if result["errors"] else 0
