#!/usr/bin/env python3
"""
bkup  —  one-way directory backup
=================================

Subcommands:
  update    Copy into DEST whatever is missing there or newer in SOURCE.

Nothing is ever deleted from DEST, and a DEST file newer than its SOURCE
counterpart is left alone.

Run 'bkup <subcommand> --help' for more details.
"""
import sys
import argparse
from pathlib import Path


# ── update ───────────────────────────────────────────────────────────────────

def cmd_update(args):
    """Run a one-way update of DEST from SOURCE."""
    import bkup.config as _cfg
    from bkup.core.engine import run_update
    from bkup.errors import BkupError
    from bkup.utils.logging import error

    try:
        _cfg.load_and_apply()
    except ValueError as exc:
        error(f"invalid configuration: {exc}")
        sys.exit(1)

    accuracy_ms = _cfg.ACCURACY_MS if args.accuracy is None else args.accuracy
    ignore = _cfg.USE_IGNORE if args.ignore is None else args.ignore
    parallel = _cfg.PARALLEL_SCAN if args.parallel is None else args.parallel
    verbose = _cfg.VERBOSE or args.verbose

    try:
        run_update(
            Path(args.source),
            Path(args.dest),
            accuracy=accuracy_ms / 1000,
            ignore=ignore,
            dry_run=args.dry_run,
            verbose=verbose,
            parallel=parallel,
        )
    except BkupError:
        sys.exit(1)
    except KeyboardInterrupt:
        print()
        error("Interrupted by user. Copies made so far are kept.")
        sys.exit(130)


def _accuracy(value: str) -> int:
    from bkup.config import parse_accuracy
    try:
        return parse_accuracy(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


# ── main ──────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bkup",
        description="One-way directory backup: source wins when strictly newer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # ── update ────────────────────────────────────────────────────────────────
    update_p = subparsers.add_parser(
        "update",
        help="Update DEST with what is missing or newer in SOURCE",
        description="Copy into DEST every file or directory that is missing there "
                    "or strictly newer in SOURCE.",
    )
    update_p.add_argument("source", metavar="SOURCE",
                          help="Source directory")
    update_p.add_argument("dest", metavar="DEST",
                          help="Destination directory")
    update_p.add_argument("--accuracy", type=_accuracy, default=None, metavar="MS",
                          help="mtime tolerance in milliseconds (default: 2000)")
    update_p.add_argument("--ignore", dest="ignore", action="store_true", default=None,
                          help="Honour the .bkignore file in SOURCE")
    update_p.add_argument("--no-ignore", dest="ignore", action="store_false",
                          help="Do not read .bkignore even if enabled in config")
    update_p.add_argument("-n", "--dry-run", action="store_true",
                          help="Preview without copying anything")
    update_p.add_argument("-v", "--verbose", action="store_true",
                          help="Show every entry considered, not just actions")
    update_p.add_argument("--no-parallel", dest="parallel", action="store_false", default=None,
                          help="Scan SOURCE and DEST one after the other")

    return parser


def main(argv=None):
    """CLI entry point for bkup"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "update":
        cmd_update(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
