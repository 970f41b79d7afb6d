"""
amlib-export CLI - Entry point

Exports artists, albums, tracks and playlists from the Apple Music library
to CSV files or the terminal.
"""

import argparse
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

from loguru import logger

from amlib_export.commands.export import EXPORT_TYPES, ExportOptions, run_export
from amlib_export.core import config as app_config
from amlib_export.core.console import safe_print
from amlib_export.core.output import setup_loguru
from amlib_export.core.system_check import run_all_checks
from amlib_export.domain.library.exceptions import ExitCode, ExportError
from amlib_export.domain.library.models import QueryKind

EXAMPLES = """
EXAMPLES:
  amlib-export                                    # Output artists to stdout
  amlib-export --type albums --sort               # Output sorted albums to stdout
  amlib-export --type artists > artists.csv       # Pipe to file
  amlib-export --type detailed --out library.csv  # Write directly to file
  amlib-export help playlist-tracks               # Show help for a type

PERMISSIONS:
  On first run, macOS will prompt for Automation permission to control Music.app.
  If denied, go to: System Settings → Privacy & Security → Automation
"""

TYPE_FLAGS = {
    QueryKind.ARTISTS: ["--sort", "--out", "--strict"],
    QueryKind.ALBUMS: ["--sort", "--out", "--composite"],
    QueryKind.TRACKS: ["--sort", "--out", "--composite"],
    QueryKind.PLAYLISTS: ["--sort", "--out"],
    QueryKind.PLAYLIST_TRACKS: ["--sort", "--out", "--playlist"],
    QueryKind.DETAILED: ["--sort", "--out"],
}


class ArgumentParser(argparse.ArgumentParser):
    """Argument errors exit with 1 so they never look like an extraction status."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("--limit requires a positive integer")
    if number <= 0:
        raise argparse.ArgumentTypeError("--limit requires a positive integer")
    return number


def query_kind(value: str) -> QueryKind:
    try:
        return QueryKind.from_name(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="amlib-export",
        description="amlib-export - Export data from Apple Music Library to CSV",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--type", "-t",
        type=query_kind,
        default=QueryKind.ARTISTS,
        metavar="TYPE",
        help=f"Extraction type: {', '.join(k.value for k in QueryKind)} (default: artists)",
    )
    parser.add_argument(
        "--out", "-o",
        type=Path,
        help="Write CSV to this file instead of stdout",
    )
    parser.add_argument(
        "--sort", "-s",
        action="store_true",
        default=None,
        help="Sort output alphabetically",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Disable album artist fallback (artists type only)",
    )
    parser.add_argument(
        "--composite",
        action="store_true",
        default=None,
        help='List albums/tracks as "Artist - Album" / "Artist - Title"',
    )
    parser.add_argument(
        "--playlist", "-p",
        action="append",
        default=[],
        metavar="NAME",
        help="Only export this playlist (playlist-tracks type; repeatable)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored terminal output",
    )
    parser.add_argument(
        "--skip-checks",
        action="store_true",
        help="Skip the macOS / osascript / Music.app pre-flight checks",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Print a default config.toml and exit",
    )

    advanced = parser.add_argument_group("advanced options")
    advanced.add_argument(
        "--limit", "-l",
        type=positive_int,
        metavar="N",
        help="Stop after N lines of engine output (for debugging)",
    )
    advanced.add_argument(
        "--no-trim",
        action="store_true",
        default=None,
        help="Disable whitespace trimming (keeps leading/trailing spaces)",
    )
    advanced.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Also write log records to stderr",
    )

    return parser


def type_help(name: str) -> Optional[str]:
    """Help text for a single export type, or None if the type is unknown."""
    try:
        kind = QueryKind.from_name(name)
    except ValueError:
        return None

    info = EXPORT_TYPES[kind]
    columns = ", ".join(info.headers)
    output = (
        f"Multi-column CSV with headers: {columns}"
        if info.multi_column
        else f'Single-column CSV with header "{columns}"'
    )
    return f"""
amlib-export --type {kind.value}

DESCRIPTION:
  {info.description}

OUTPUT FORMAT:
  {output}

RELEVANT FLAGS:
  {', '.join(TYPE_FLAGS[kind])}

EXAMPLE:
  amlib-export --type {kind.value} --sort --out {kind.value}.csv
"""


def print_help(parser: ArgumentParser, args: List[str]) -> int:
    """Handle ``amlib-export help [TYPE]``."""
    if not args:
        parser.print_help()
        return 0

    text = type_help(args[0])
    if text is None:
        valid = ", ".join(k.value for k in QueryKind)
        print(f'Error: Unknown type "{args[0]}". Valid types: {valid}', file=sys.stderr)
        return 1
    print(text)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the amlib-export command."""
    argv = sys.argv[1:] if argv is None else list(argv)
    parser = build_parser()

    if argv and argv[0] == "help":
        return print_help(parser, argv[1:])

    args = parser.parse_args(argv)

    if args.print_config:
        print(app_config.create_default_config())
        return 0

    cfg = app_config.load_config()
    setup_loguru(
        Path(cfg.logging.log_file) if cfg.logging.log_file else None,
        level=cfg.logging.level,
        max_file_size_mb=cfg.logging.max_file_size_mb,
        backup_count=cfg.logging.backup_count,
        console_output=cfg.logging.console_output or args.verbose,
    )

    if not args.skip_checks:
        check = run_all_checks(cfg.export.osascript_path)
        if not check.ok:
            safe_print(check.message, style="red")
            return 1

    overrides = {
        "kind": args.type,
        "out": args.out.expanduser().resolve() if args.out else None,
        "limit": args.limit,
        "playlists": args.playlist,
    }
    # Flags only override config when given
    for name, value in (
        ("sort", args.sort),
        ("strict", args.strict),
        ("composite", args.composite),
        ("no_trim", args.no_trim),
    ):
        if value is not None:
            overrides[name] = value
    if args.no_color:
        overrides["color"] = False

    options = ExportOptions.from_config(cfg, **overrides)

    if options.playlists and options.kind is not QueryKind.PLAYLIST_TRACKS:
        safe_print("Warning: --playlist only applies to --type playlist-tracks", style="yellow")

    safe_print(f"Extracting {options.kind.value} from Music.app...", style="dim")
    safe_print("This may take a moment for large libraries...", style="dim")

    try:
        run_export(options, cfg)
    except ExportError as e:
        logger.error(f"Export failed ({e.kind.value}): {e.detail}")
        safe_print(str(e), style="red")
        return int(e.exit_code)
    except KeyboardInterrupt:
        safe_print("\nCancelled.", style="yellow")
        return 130

    return int(ExitCode.SUCCESS)


if __name__ == "__main__":
    sys.exit(main())
