import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from proofcore.checker import check_directory
from proofcore.config import Settings
from proofcore.report import format_report
from proofcore.result import Err, Ok
from proofcore.serialization import DocumentError, loads

logger = logging.getLogger(__name__)


def handle_check(files: Sequence[str], *, verbose: bool, max_errors: int) -> int:
    """Load, check and report on a list of JSON documents.

    Returns 0 if every document is valid, 1 if any is invalid and 2 if any
    could not be read at all.
    """
    exit_code = 0
    for path in files:
        try:
            text = Path(path).read_text()
        except OSError as e:
            print(f"{path}: could not read file: {e}", file=sys.stderr)
            exit_code = 2
            continue

        try:
            directory = loads(text)
        except DocumentError as e:
            print(f"{path}: malformed document: {e}", file=sys.stderr)
            exit_code = 2
            continue

        logger.debug("Checking %s", path)
        result = check_directory(directory)
        print(
            format_report(
                path, result, directory, max_errors=max_errors, verbose=verbose
            )
        )
        if not result.is_valid and exit_code == 0:
            exit_code = 1
    return exit_code


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="proofcore",
        description="Check proofs in resolved proof documents.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Command: check
    check_parser = subparsers.add_parser(
        "check", help="Verify and check one or more JSON documents."
    )
    check_parser.add_argument("files", nargs="+", help="Document files to check.")
    check_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Also list the steps synthesized for macro justifications.",
    )

    args = parser.parse_args(argv)

    match Settings.from_env():
        case Ok(settings):
            pass
        case Err(e):
            print(f"Error reading settings: {e}", file=sys.stderr)
            return 2
    logging.basicConfig(level=settings.logging_level)

    match args.command:
        case "check":
            return handle_check(
                args.files,
                verbose=args.verbose,
                max_errors=settings.max_reported_errors,
            )
        case None:
            parser.print_help()
            return 1
        case _:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            parser.print_help()
            return 1


if __name__ == "__main__":
    sys.exit(main())
