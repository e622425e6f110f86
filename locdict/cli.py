"""Command line interface for the locdict toolkit."""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from typing import Iterable, Optional, TextIO

from .configuration import get_settings
from .errors import (
    ConfigurationError,
    LocdictError,
    OverwriteRefusedError,
    UnknownError,
)
from .logger import configure_logging
from .pipeline import (
    Command,
    CreateDictionary,
    MergeDictionaries,
    PipelineRunner,
    PipelineSummary,
    SwapDictionary,
    TranslateSource,
    validate_paths,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="locdict",
        description=(
            "Build, merge, swap and apply localization dictionaries "
            "stored as tab-delimited files."
        ),
    )
    commands = parser.add_mutually_exclusive_group(required=True)
    commands.add_argument(
        "-c",
        "--create-dict",
        nargs="+",
        metavar="FILE",
        help="Create a new dictionary from a SRC file, and optionally a DST file.",
    )
    commands.add_argument(
        "-m",
        "--merge-dict",
        nargs=2,
        metavar=("DICT1", "DICT2"),
        help="Merge two dictionaries; entries of DICT2 win on shared keys.",
    )
    commands.add_argument(
        "-s",
        "--swap-dict",
        metavar="DICT",
        help="Swap the source and destination of a dictionary.",
    )
    commands.add_argument(
        "-t",
        "--translate",
        nargs=2,
        metavar=("SRC", "DICT"),
        help="Translate a source file with a dictionary.",
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Save the result in a file instead of writing to standard output.",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Allow overwriting the output file if it already exists.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when a text does not fit the placeholders of its dictionary entry.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity; repeat for more detail.",
    )
    return parser


def _path(value: str) -> pathlib.Path:
    return pathlib.Path(value).expanduser().resolve()


def command_from_args(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
) -> Command:
    """Turn the selected command line option into a command value."""

    if args.create_dict is not None:
        if len(args.create_dict) > 2:
            parser.error("argument -c/--create-dict: expected at most 2 arguments")
        source = _path(args.create_dict[0])
        destination = _path(args.create_dict[1]) if len(args.create_dict) == 2 else None
        return CreateDictionary(source=source, destination=destination)
    if args.merge_dict is not None:
        first, second = args.merge_dict
        return MergeDictionaries(first=_path(first), second=_path(second))
    if args.swap_dict is not None:
        return SwapDictionary(dictionary=_path(args.swap_dict))
    source, dictionary = args.translate
    return TranslateSource(source=_path(source), dictionary=_path(dictionary))


def execute_command(
    *,
    command: Command,
    output_file: str | None,
    force_overwrite: bool,
    comment_prefix: str,
    strict_placeholders: bool,
) -> tuple[int, PipelineSummary | None, str | None]:
    """Run a command and return the exit code, summary, and message."""

    output_path = _path(output_file) if output_file else None

    try:
        validate_paths(command.inputs, output_path, force_overwrite=force_overwrite)
    except FileNotFoundError as exc:
        return 1, None, str(exc)
    except OverwriteRefusedError as exc:
        return 1, None, str(exc)
    except LocdictError as exc:
        return 1, None, str(exc)

    if output_path is not None:
        output_path.parent.mkdir(parents=True, exist_ok=True)

    runner = PipelineRunner(
        command=command,
        output_path=output_path,
        comment_prefix=comment_prefix,
        strict_placeholders=strict_placeholders,
    )

    try:
        summary = runner.run()
    except LocdictError as exc:
        return 1, None, str(exc)
    except KeyboardInterrupt:
        return 2, None, "Interrupted by user."
    except Exception as exc:  # pragma: no cover
        logger.debug("Unexpected failure", exc_info=True)
        error = UnknownError(f"An unexpected error occurred: {exc}")
        return 1, None, f"{error}\nRerun with -vv for more details."

    return 0, summary, None


def print_summary(summary: PipelineSummary, stream: TextIO | None = None) -> None:
    """Report the outcome of a run on standard error."""

    out = stream or sys.stderr
    print(f"Command:         {summary.command}", file=out)
    for path in summary.input_paths:
        print(f"  Input file:    {path}", file=out)
    print(f"  Output:        {summary.output_path or '<standard output>'}", file=out)
    print(f"  Records:       {summary.records_written} written", file=out)
    print(f"  Untranslated:  {summary.untranslated}", file=out)
    print(f"  Elapsed time:  {summary.elapsed_seconds:.2f} seconds", file=out)
    if summary.notes:
        print("  Notes:", file=out)
        for message in summary.notes:
            print(f"    - {message}", file=out)


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    command = command_from_args(parser, args)

    try:
        settings = get_settings()
    except ConfigurationError as exc:
        print(exc, file=sys.stderr)
        return 1

    log_file = settings.LOCDICT_LOG_FILE
    configure_logging(
        args.verbose,
        base_level=logging.getLevelName(settings.LOCDICT_LOG_LEVEL),
        log_file=pathlib.Path(log_file) if log_file else None,
    )

    exit_code, summary, message = execute_command(
        command=command,
        output_file=args.output,
        force_overwrite=args.force,
        comment_prefix=settings.LOCDICT_COMMENT_PREFIX,
        strict_placeholders=args.strict or settings.LOCDICT_STRICT_PLACEHOLDERS,
    )

    if message:
        logger.error(message)
    if summary and args.verbose:
        print_summary(summary)
    return exit_code


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
