"""Localization dictionaries built from tab-delimited record files."""

from .dictionary import Dictionary
from .errors import (
    LocdictError,
    ParseError,
    RecordIOError,
    TranslationMismatchError,
)
from .structures import Literal, Placeholder
from .translation import Translation

__all__ = [
    "Dictionary",
    "Literal",
    "LocdictError",
    "ParseError",
    "Placeholder",
    "RecordIOError",
    "Translation",
    "TranslationMismatchError",
]

__version__ = "0.1.0"
