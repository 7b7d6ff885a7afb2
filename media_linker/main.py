import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from . import config
from .core import MediaLinkerApp
from .exceptions import ConfigError, MediaLinkerError
from .reporting import ReportGenerator


def setup_logging(log_file: Optional[Path], verbose: bool):
    """Sets up logging to the console and, if asked, appending to a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format=config.LOG_FORMAT,
        handlers=handlers
    )


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(
        prog="media-linker",
        description="Media Linker: classify movies and episodes by name and mirror them as tidy symlinks",
    )

    p.add_argument("inputs", type=Path, nargs="+", help="Directories or files to classify")

    p.add_argument("--out-dir", nargs=2, action="append", metavar=("CATEGORY", "DIR"), default=[],
                   help=f"Destination root for a category ({', '.join(config.CATEGORIES)}); repeatable")
    p.add_argument("--creation-sandbox", action="store_true", help="Decide links but do not create or replace any")
    p.add_argument("--deletion-sandbox", action="store_true", help="Report what culling would remove without removing it")
    p.add_argument("--dry-run", action="store_true", help="Both sandboxes: leave the filesystem untouched")
    p.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    p.add_argument("--log-file", type=Path, default=None, help="Also append the log to this file")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--report-csv", type=Path, default=None, help="Write a CSV of every link decision")

    return p.parse_args(argv)


def resolve_dest_dirs(pairs: List[List[str]], create: bool) -> Dict[str, Path]:
    """Maps category -> real destination path, creating missing roots unless sandboxed."""
    if not pairs:
        raise ConfigError("No destinations given; use --out-dir movies DIR and/or --out-dir shows DIR.")

    dest_dirs: Dict[str, Path] = {}
    for category, directory in pairs:
        if category not in config.CATEGORIES:
            raise ConfigError(f"Unknown category '{category}' (expected {', '.join(config.CATEGORIES)})")
        path = Path(directory).expanduser()
        if create:
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ConfigError(f"Cannot create destination {path}: {e}") from e
        dest_dirs[category] = path.resolve()
    return dest_dirs


def resolve_inputs(inputs: List[Path]) -> List[Path]:
    missing = [str(p) for p in inputs if not p.exists()]
    if missing:
        raise ConfigError(f"Input paths not found: {', '.join(missing)}")
    return [p.resolve() for p in inputs]


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    creation_sandbox = args.creation_sandbox or args.dry_run
    deletion_sandbox = args.deletion_sandbox or args.dry_run

    setup_logging(args.log_file, args.verbose)

    try:
        dest_dirs = resolve_dest_dirs(args.out_dir, create=not creation_sandbox)
        inputs = resolve_inputs(args.inputs)
    except MediaLinkerError as e:
        logging.error(str(e))
        return 1

    logging.info(f"=== Media Linker: {len(inputs)} input paths, {len(dest_dirs)} output directories ===")
    for category, path in dest_dirs.items():
        logging.info(f"{category:<7} -> {path}")

    try:
        app = MediaLinkerApp(dest_dirs)
        summary = app.run(
            inputs,
            creation_sandbox=creation_sandbox,
            deletion_sandbox=deletion_sandbox,
            progress=not args.no_progress,
        )
        if args.report_csv:
            ReportGenerator(summary).write_csv(args.report_csv)
    except MediaLinkerError as e:
        logging.error(str(e))
        return 1
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        return 1
    except Exception:
        logging.exception("Fatal error during linking.")
        return 1

    logging.info("Signing off.")
    return 2 if summary.failed else 0


if __name__ == "__main__":
    sys.exit(main())
