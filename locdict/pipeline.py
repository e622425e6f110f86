"""High-level orchestration of dictionary commands."""

from __future__ import annotations

import logging
import pathlib
import time
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple, Union

from . import records
from .dictionary import Dictionary
from .errors import LocdictError, OverwriteRefusedError, ParseError
from .extractors import source_entry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateDictionary:
    """Build a dictionary from a source file and an optional destination file."""

    source: pathlib.Path
    destination: Optional[pathlib.Path] = None

    name = "create-dict"

    @property
    def inputs(self) -> Tuple[pathlib.Path, ...]:
        if self.destination is None:
            return (self.source,)
        return (self.source, self.destination)


@dataclass(frozen=True)
class MergeDictionaries:
    """Merge two dictionaries, the second one winning on shared keys."""

    first: pathlib.Path
    second: pathlib.Path

    name = "merge-dict"

    @property
    def inputs(self) -> Tuple[pathlib.Path, ...]:
        return (self.first, self.second)


@dataclass(frozen=True)
class SwapDictionary:
    """Exchange the source and destination sides of a dictionary."""

    dictionary: pathlib.Path

    name = "swap-dict"

    @property
    def inputs(self) -> Tuple[pathlib.Path, ...]:
        return (self.dictionary,)


@dataclass(frozen=True)
class TranslateSource:
    """Translate the texts of a source file with a dictionary."""

    source: pathlib.Path
    dictionary: pathlib.Path

    name = "translate"

    @property
    def inputs(self) -> Tuple[pathlib.Path, ...]:
        return (self.source, self.dictionary)


Command = Union[CreateDictionary, MergeDictionaries, SwapDictionary, TranslateSource]


@dataclass
class PipelineSummary:
    """Report returned after running a command."""

    command: str
    input_paths: List[pathlib.Path]
    output_path: Optional[pathlib.Path]
    records_written: int
    untranslated: int
    elapsed_seconds: float
    notes: List[str] = field(default_factory=list)


class PipelineRunner:
    """Reads the inputs of a command, applies it and writes the sorted result."""

    def __init__(
        self,
        *,
        command: Command,
        output_path: Optional[pathlib.Path] = None,
        comment_prefix: str = records.DEFAULT_COMMENT_PREFIX,
        strict_placeholders: bool = False,
    ) -> None:
        self.command = command
        self.output_path = output_path
        self.comment_prefix = comment_prefix
        self.strict_placeholders = strict_placeholders

    def run(self) -> PipelineSummary:
        start_time = time.time()
        logger.info(
            "Running %s on %s.",
            self.command.name,
            ", ".join(str(path) for path in self.command.inputs),
        )

        notes: List[str] = []
        if isinstance(self.command, TranslateSource):
            rows, untranslated = self._translate(self.command)
            if untranslated:
                notes.append(f"{untranslated} text(s) had no translation.")
        else:
            dictionary = self._build(self.command)
            rows = dictionary.rows()
            untranslated = len(dictionary.untranslated())
            if untranslated:
                notes.append(f"{untranslated} entries have no destination text.")

        if self.output_path is None:
            written = records.write_stdout(rows)
        else:
            written = records.write_file(rows, self.output_path)

        return PipelineSummary(
            command=self.command.name,
            input_paths=list(self.command.inputs),
            output_path=self.output_path,
            records_written=written,
            untranslated=untranslated,
            elapsed_seconds=time.time() - start_time,
            notes=notes,
        )

    def _read(self, path: pathlib.Path) -> List[records.Record]:
        try:
            return records.read_file(path, comment_prefix=self.comment_prefix)
        except ParseError as exc:
            raise _located(exc, path) from exc

    def _load_dictionary(self, path: pathlib.Path) -> Dictionary:
        rows = self._read(path)
        try:
            return Dictionary.from_existing_dictionary(rows)
        except ParseError as exc:
            raise _located(exc, path) from exc

    def _build(self, command: Command) -> Dictionary:
        if isinstance(command, CreateDictionary):
            source_rows = self._read(command.source)
            if command.destination is None:
                return Dictionary.from_source(source_rows, source_entry)
            destination_rows = self._read(command.destination)
            try:
                return Dictionary.from_source_and_destination(
                    source_rows, destination_rows, source_entry
                )
            except ParseError as exc:
                failed = command.destination if exc.side == "destination" else command.source
                raise _located(exc, failed) from exc
        if isinstance(command, MergeDictionaries):
            first = self._load_dictionary(command.first)
            second = self._load_dictionary(command.second)
            return first.merge(second)
        if isinstance(command, SwapDictionary):
            return self._load_dictionary(command.dictionary).swap()
        raise TypeError(f"Unsupported command {command!r}")

    def _translate(self, command: TranslateSource) -> Tuple[List[Tuple[Any, str]], int]:
        source_rows = self._read(command.source)
        dictionary = self._load_dictionary(command.dictionary)
        try:
            results = dictionary.translate(
                source_rows, source_entry, strict=self.strict_placeholders
            )
        except ParseError as exc:
            raise _located(exc, command.source) from exc
        untranslated = sum(1 for _, text in results if not text)
        return sorted(results), untranslated


def _located(exc: ParseError, path: pathlib.Path) -> ParseError:
    return ParseError(
        f"{path}: {exc.reason}",
        record=exc.record,
        position=exc.position,
        side=exc.side,
    )


def validate_paths(
    input_paths: Sequence[pathlib.Path],
    output_path: Optional[pathlib.Path],
    force_overwrite: bool,
) -> None:
    """Validate input/output path combinations and overwrite policy."""

    for input_path in input_paths:
        if not input_path.exists():
            raise FileNotFoundError(f"Input file not found: {input_path}")
        if not input_path.is_file():
            raise LocdictError(f"Input path must be a file: {input_path}")

    if output_path is None:
        return

    if any(output_path.resolve() == path.resolve() for path in input_paths):
        raise OverwriteRefusedError(
            f"The output path {output_path} is also an input. Refusing to overwrite it."
        )

    if output_path.exists() and not force_overwrite:
        raise OverwriteRefusedError(
            f"The output file {output_path} already exists. Use --force to overwrite it."
        )
