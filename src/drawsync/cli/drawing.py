"""Drawing CLI commands."""

import argparse

from drawsync.errors import DrawsyncError


def cmd_new(args: argparse.Namespace) -> int:
    from drawsync.creator import create_drawing

    try:
        path = create_drawing(args.settings)
    except (DrawsyncError, OSError) as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Created {path}")
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    from drawsync.commands import current_platform, request_render
    from drawsync.paths import companion_image_path, validate_drawing_path

    s = args.settings
    try:
        validate_drawing_path(args.drawing)
        request_render(args.drawing, current_platform(), s.converter, s.converter_args)
    except (DrawsyncError, OSError, ValueError) as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Render requested: {companion_image_path(args.drawing, s.image_dir)}")
    return 0
