"""Placeholder-aware representation of localized strings."""

from __future__ import annotations

import re
from functools import total_ordering
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .errors import ParseError, TranslationMismatchError
from .structures import Literal, Placeholder, Segment

MARKER_OPEN = "{:"
MARKER_CLOSE = "}"
INDEX_PATTERN = re.compile(r"0|[1-9][0-9]*")


@total_ordering
class Translation:
    """An ordered sequence of literal runs and positional placeholders.

    Two translations are equal when they decompose into the same segments,
    regardless of where the text came from. Ordering is segment-wise: a
    literal sorts before a placeholder, literals compare by text and
    placeholders by index.
    """

    __slots__ = ("_segments", "_hash")

    def __init__(self, segments: Iterable[Segment] = ()) -> None:
        merged: List[Segment] = []
        for segment in segments:
            if isinstance(segment, Literal):
                if not segment.text:
                    continue
                if merged and isinstance(merged[-1], Literal):
                    merged[-1] = Literal(merged[-1].text + segment.text)
                    continue
            merged.append(segment)
        self._segments: Tuple[Segment, ...] = tuple(merged)
        self._hash = hash(self._segments)

    @classmethod
    def parse(cls, raw: str) -> "Translation":
        """Split raw text on `{:N}` markers."""

        segments: List[Segment] = []
        cursor = 0
        length = len(raw)
        while cursor < length:
            start = raw.find(MARKER_OPEN, cursor)
            if start == -1:
                segments.append(Literal(raw[cursor:]))
                break
            if start > cursor:
                segments.append(Literal(raw[cursor:start]))
            end = raw.find(MARKER_CLOSE, start + len(MARKER_OPEN))
            if end == -1:
                raise ParseError(
                    f"Unterminated placeholder marker at offset {start} in {raw!r}.",
                    position=start,
                )
            token = raw[start + len(MARKER_OPEN):end]
            if not INDEX_PATTERN.fullmatch(token):
                raise ParseError(
                    f"Invalid placeholder index {token!r} at offset {start} in {raw!r}.",
                    position=start,
                )
            segments.append(Placeholder(int(token)))
            cursor = end + len(MARKER_CLOSE)
        return cls(segments)

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return self._segments

    @property
    def placeholders(self) -> List[int]:
        """Placeholder indices in order of appearance."""

        return [
            segment.index
            for segment in self._segments
            if isinstance(segment, Placeholder)
        ]

    @property
    def is_template(self) -> bool:
        return any(isinstance(segment, Placeholder) for segment in self._segments)

    def to_text(self) -> str:
        return "".join(segment.render() for segment in self._segments)

    def match(self, runtime_text: str) -> Optional[Dict[int, str]]:
        """Capture the placeholder values of runtime text using this skeleton.

        Literal runs must appear verbatim; every placeholder captures the
        text at its position. Returns None when the text does not fit.
        """

        return self.skeleton().match(runtime_text)

    def skeleton(self) -> "Skeleton":
        return Skeleton(self)

    def translate(self, runtime_text: str, source: Optional["Translation"] = None) -> str:
        """Render this template with the placeholder values of runtime text.

        With a source skeleton, values are captured from the runtime text and
        picked by placeholder index. Without one, the runtime text is expected
        to be template-shaped itself: its own `{:N}` markers fill this template
        position by position, so `Hello {:3}` through `Bonjour {:0}` gives
        `Bonjour {:3}`. Dictionary translation always passes a source.
        """

        if source is None:
            supplied = Translation.parse(runtime_text).placeholders
            expected = self.placeholders
            if len(supplied) != len(expected):
                raise TranslationMismatchError(
                    f"{runtime_text!r} carries {len(supplied)} placeholder(s), "
                    f"template {self.to_text()!r} expects {len(expected)}."
                )
            values = iter(Placeholder(index).render() for index in supplied)
            return "".join(
                segment.text if isinstance(segment, Literal) else next(values)
                for segment in self._segments
            )

        arguments = source.match(runtime_text)
        if arguments is None:
            raise TranslationMismatchError(
                f"{runtime_text!r} does not fit the skeleton {source.to_text()!r}."
            )
        pieces: List[str] = []
        for segment in self._segments:
            if isinstance(segment, Literal):
                pieces.append(segment.text)
            elif segment.index in arguments:
                pieces.append(arguments[segment.index])
            else:
                raise TranslationMismatchError(
                    f"Template {self.to_text()!r} references {segment.render()} "
                    f"which {source.to_text()!r} does not provide."
                )
        return "".join(pieces)

    def _sort_key(self) -> tuple:
        return tuple(segment.sort_key() for segment in self._segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Translation):
            return NotImplemented
        return self._segments == other._segments

    def __lt__(self, other: "Translation") -> bool:
        if not isinstance(other, Translation):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __hash__(self) -> int:
        return self._hash

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"Translation({self.to_text()!r})"


class Skeleton:
    """The literal runs of a translation, used to capture placeholder values.

    Runtime text must start with the leading literal and end with the
    trailing one. In between, every placeholder captures the text up to the
    leftmost occurrence of the literal that follows it, so matching is a
    single forward scan with no backtracking. A repeated index must capture
    the same value at each occurrence.
    """

    __slots__ = ("prefix", "suffix", "steps", "literal_length")

    def __init__(self, translation: Translation) -> None:
        segments = list(translation.segments)
        self.prefix = ""
        self.suffix = ""
        if segments and isinstance(segments[0], Literal):
            self.prefix = segments.pop(0).text
        if segments and isinstance(segments[-1], Literal):
            self.suffix = segments.pop().text

        # (placeholder index, literal run that follows it)
        steps: List[Tuple[int, str]] = []
        for segment in segments:
            if isinstance(segment, Placeholder):
                steps.append((segment.index, ""))
            else:
                steps[-1] = (steps[-1][0], segment.text)
        self.steps: Tuple[Tuple[int, str], ...] = tuple(steps)
        self.literal_length = len(self.prefix) + len(self.suffix) + sum(
            len(literal) for _, literal in steps
        )

    def match(self, runtime_text: str) -> Optional[Dict[int, str]]:
        start = len(self.prefix)
        end = len(runtime_text) - len(self.suffix)
        if end < start:
            return None
        if not (runtime_text.startswith(self.prefix) and runtime_text.endswith(self.suffix)):
            return None
        if not self.steps:
            return {} if start == end else None

        values: Dict[int, str] = {}
        cursor = start
        last = len(self.steps) - 1
        for position, (index, literal) in enumerate(self.steps):
            if position == last:
                value = runtime_text[cursor:end]
            elif literal:
                found = runtime_text.find(literal, cursor, end)
                if found == -1:
                    return None
                value = runtime_text[cursor:found]
                cursor = found + len(literal)
            else:
                value = ""
            if values.setdefault(index, value) != value:
                return None
        return values
