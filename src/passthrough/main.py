"""Command line entry point for checking passthrough configuration."""

import argparse
import logging
import sys

from .config import ConfigLoader, SchemaError
from .config.durations import format_duration
from .config.loader import dump_display, dump_position
from .config.schema import Config


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Validate the camera passthrough overlay configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-c", "--config",
        metavar="PATH",
        help="Configuration file (default: search the XDG config directories)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject unknown keys instead of ignoring them",
    )
    parser.add_argument(
        "--defaults",
        action="store_true",
        help="Print the default configuration as YAML and quit",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def describe(config: Config) -> list[str]:
    """Human readable summary of a configuration."""
    position = dump_position(config.overlay.position)
    display = dump_display(config.display_mode)
    return [
        f"backend:       {config.backend.value}",
        f"camera:        {config.camera_device or '(autodetect)'}",
        f"position:      {position.pop('mode')} {position}",
        f"display:       {display.pop('mode')} {display}",
        f"toggle button: {config.toggle_button.value}",
        f"open delay:    {format_duration(config.open_delay)}",
        f"z order:       {config.z_order}",
        f"debug:         {config.debug}",
    ]


def main(argv: list[str] | None = None) -> int:
    """Run the configuration check."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    loader = ConfigLoader(strict=args.strict)

    if args.defaults:
        print(loader.dumps(loader.default()), end="")
        return 0

    try:
        config = loader.load(args.config)
    except SchemaError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print("Camera passthrough configuration")
    print("=" * 40)
    for line in describe(config):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
