"""Tab-delimited record reading and writing."""

from __future__ import annotations

import codecs
import csv
import io
import logging
import pathlib
import sys
from typing import Any, Iterable, List, Optional, TextIO, Tuple

from .errors import ParseError, RecordIOError

logger = logging.getLogger(__name__)

DELIMITER = "\t"
DEFAULT_COMMENT_PREFIX = "# "

BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)

Record = Tuple[str, ...]


def decode(data: bytes, *, source: str = "<bytes>") -> str:
    """Decode raw bytes, honouring a byte order mark and defaulting to UTF-8."""

    encoding = "utf-8"
    for bom, candidate in BOMS:
        if data.startswith(bom):
            encoding = candidate
            break

    try:
        return data.decode(encoding)
    except UnicodeDecodeError as exc:
        line = data[: exc.start].count(b"\n") + 1
        raise ParseError(
            f"Undecodable {encoding} byte sequence in {source} at line {line}.",
            position=exc.start,
        ) from exc


def strip_comments(text: str, prefix: str = DEFAULT_COMMENT_PREFIX) -> str:
    """Drop the block of comment lines at the top of the text."""

    lines = text.split("\n")
    start = 0
    while start < len(lines) and lines[start].startswith(prefix):
        start += 1
    if start:
        logger.debug("Skipped %d leading comment line(s).", start)
    return "\n".join(lines[start:])


def read(text: str) -> List[Record]:
    """Parse tab-delimited text into records of equal width."""

    records: List[Record] = []
    width: Optional[int] = None
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=DELIMITER)
    try:
        for row in reader:
            if not row:
                continue
            if width is None:
                width = len(row)
            elif len(row) != width:
                raise ParseError(
                    f"Expected {width} fields, found {len(row)} (line {reader.line_num}).",
                    record=len(records) + 1,
                )
            records.append(tuple(row))
    except csv.Error as exc:
        raise ParseError(
            f"{exc} (line {reader.line_num}).", record=len(records) + 1
        ) from exc
    return records


def _flatten(record: Iterable[Any]) -> List[str]:
    fields: List[str] = []
    for value in record:
        if isinstance(value, tuple):
            fields.extend(_flatten(value))
        elif value is None:
            fields.append("")
        else:
            fields.append(str(value))
    return fields


def write_stream(records: Iterable[Iterable[Any]], stream: TextIO) -> int:
    """Write records to an open text stream and return how many were written."""

    writer = csv.writer(stream, delimiter=DELIMITER, lineterminator="\n")
    count = 0
    for record in records:
        writer.writerow(_flatten(record))
        count += 1
    stream.flush()
    return count


def write(records: Iterable[Iterable[Any]]) -> str:
    buffer = io.StringIO()
    write_stream(records, buffer)
    return buffer.getvalue()


def read_file(
    path: pathlib.Path,
    *,
    comment_prefix: str = DEFAULT_COMMENT_PREFIX,
) -> List[Record]:
    """Load every record of a file, skipping its leading comment lines."""

    try:
        data = pathlib.Path(path).read_bytes()
    except OSError as exc:
        raise RecordIOError(f"Could not read {path}: {exc.strerror or exc}") from exc

    text = strip_comments(decode(data, source=str(path)), comment_prefix)
    records = read(text)
    logger.info("Read %d records from %s.", len(records), path)
    return records


def write_file(records: Iterable[Iterable[Any]], path: pathlib.Path) -> int:
    try:
        with open(path, "w", encoding="utf-8", newline="") as handle:
            count = write_stream(records, handle)
    except OSError as exc:
        raise RecordIOError(f"Could not write {path}: {exc.strerror or exc}") from exc
    logger.info("Wrote %d records to %s.", count, path)
    return count


def write_stdout(records: Iterable[Iterable[Any]]) -> int:
    try:
        return write_stream(records, sys.stdout)
    except OSError as exc:
        raise RecordIOError(f"Could not write to standard output: {exc}") from exc
