"""Strategies turning raw records into (key, text) pairs."""

from __future__ import annotations

from typing import Tuple

from .structures import Row

SOURCE_COLUMNS = 4
DICTIONARY_COLUMNS = 2

SourceKey = Tuple[str, str, str]


def _require_columns(record: Row, expected: int) -> None:
    if len(record) != expected:
        raise ValueError(f"expected {expected} columns, found {len(record)}")


def source_entry(record: Row) -> Tuple[SourceKey, str]:
    """Key a (component-type, component-name, reference-number, text) row."""

    _require_columns(record, SOURCE_COLUMNS)
    component_type, component_name, reference, text = record
    return (component_type, component_name, reference), text


def dictionary_entry(record: Row) -> Tuple[str, str]:
    _require_columns(record, DICTIONARY_COLUMNS)
    key_text, value_text = record
    return key_text, value_text
