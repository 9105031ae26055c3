"""Watch CLI command."""

import argparse

from drawsync.errors import ConfigurationError


def cmd_watch(args: argparse.Namespace) -> int:
    from drawsync.watcher import WatchHandle, run_forever

    handle = WatchHandle(args.settings)
    try:
        run_forever(handle)
    except ConfigurationError as e:
        print(f"ERROR: {e}")
        return 1
    return 0
