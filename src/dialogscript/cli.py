"""Command-line interface for dialogscript."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import load_config
from .errors import DialogScriptError
from .exporters import EXPORT_FORMATS
from .library import SessionLibrary, SortOption
from .watcher import run_export, watch


def _add_export_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("session", type=Path, help="Path to a session JSON file")
    parser.add_argument(
        "--format", "-f",
        dest="formats",
        action="append",
        choices=sorted(EXPORT_FORMATS),
        default=None,
        help="Export format (repeatable; default: formats from config)",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Directory to write exports to (default: output_dir from config)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be written without writing files",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dialogscript",
        description="Export two-speaker screenplay dialogues to text, RTF, Final Draft and PDF",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to config YAML (default: ~/.config/dialogscript/config.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    export_parser = commands.add_parser("export", help="Export a session once")
    _add_export_arguments(export_parser)

    watch_parser = commands.add_parser("watch", help="Re-export a session whenever it changes")
    _add_export_arguments(watch_parser)

    list_parser = commands.add_parser("list", help="List sessions in the library")
    list_parser.add_argument(
        "--sort",
        choices=[option.value for option in SortOption],
        default=SortOption.ALPHABETICAL.value,
        help="Sort order (default: alphabetical)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1) from None

    try:
        match args.command:
            case "export":
                written = run_export(
                    args.session,
                    config,
                    formats=args.formats,
                    output_dir=args.output,
                    dry_run=args.dry_run,
                )
                print(f"Exported {len(written)} file(s)")
            case "watch":
                watch(
                    args.session,
                    config,
                    formats=args.formats,
                    output_dir=args.output,
                    dry_run=args.dry_run,
                )
            case "list":
                library = SessionLibrary(config.library_path, sort_option=SortOption(args.sort))
                if not library.sessions:
                    print("No saved dialogues")
                for session in library.sessions:
                    print(
                        f"{session.last_modified:%Y-%m-%d %H:%M}  "
                        f"{session.element_count:>4} lines  {session.title}"
                    )
    except DialogScriptError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1) from None
