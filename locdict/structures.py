"""Core data structures for the locdict toolkit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Hashable, Sequence, Tuple, Union


Row = Sequence[str]
Extractor = Callable[[Row], Tuple[Hashable, str]]


@dataclass(frozen=True)
class Literal:
    """A run of text copied verbatim."""

    text: str

    def render(self) -> str:
        return self.text

    def sort_key(self) -> tuple:
        return (0, self.text)


@dataclass(frozen=True)
class Placeholder:
    """A positional format marker referencing a runtime argument."""

    index: int

    def render(self) -> str:
        return f"{{:{self.index}}}"

    def sort_key(self) -> tuple:
        return (1, self.index)


Segment = Union[Literal, Placeholder]
