"""Command-line entry point: render a stored document for read-only display."""
from __future__ import annotations

import logging
import sys

from embeds.kernel.config import settings
from embeds.kernel.renderer import render
from embeds.kernel.types import RenderOptions


def print_help():
    """Print help message."""
    print("""
Usage:
  python -m embeds.kernel.cli render FILE [--dark | --light]

Arguments:
  FILE              Stored document markup ("-" reads stdin)

Options:
  --dark            Resolve default colors for a dark theme
  --light           Resolve default colors for a light theme
  -h, --help        Show this help

Environment:
  EMBEDS_DEFAULT_THEME     Theme when neither --dark nor --light is given
  EMBEDS_LOG_LEVEL         Logging level (default: WARNING)
""")


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL, logging.WARNING), format="%(levelname)s %(name)s: %(message)s")

    if not args or args[0] in ("-h", "--help"):
        print_help()
        return 0

    command, rest = args[0], args[1:]
    if command != "render":
        print(f"Unknown command: {command}", file=sys.stderr)
        print_help()
        return 2

    is_dark: bool | None = None
    paths = []
    for arg in rest:
        if arg == "--dark":
            is_dark = True
        elif arg == "--light":
            is_dark = False
        else:
            paths.append(arg)

    if len(paths) != 1:
        print("render needs exactly one FILE", file=sys.stderr)
        return 2

    path = paths[0]
    try:
        if path == "-":
            markup = sys.stdin.read()
        else:
            with open(path, encoding="utf-8") as f:
                markup = f.read()
    except OSError as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(render(markup, RenderOptions(is_dark_theme=is_dark)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
