"""Localization dictionary built on top of the translation model."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Dict, Hashable, Iterable, Iterator, List, Optional, Tuple

from .errors import ParseError, TranslationMismatchError
from .extractors import dictionary_entry
from .structures import Extractor, Row
from .translation import Skeleton, Translation

logger = logging.getLogger(__name__)

Entries = Dict[Translation, Optional[Translation]]


def _extract(
    row: Row,
    extract: Extractor,
    number: int,
    side: Optional[str] = None,
) -> Tuple[Hashable, str]:
    try:
        return extract(row)
    except (ValueError, IndexError, TypeError) as exc:
        raise ParseError(f"Malformed record: {exc}", record=number, side=side) from exc


def _extract_all(
    rows: Iterable[Row],
    extract: Extractor,
    side: Optional[str] = None,
) -> Dict[Hashable, Tuple[int, str]]:
    """Map extraction keys to (record number, text); later records win."""

    texts: Dict[Hashable, Tuple[int, str]] = {}
    for number, row in enumerate(rows, start=1):
        key, text = _extract(row, extract, number, side)
        if key in texts:
            logger.debug("Record %d overrides extraction key %r.", number, key)
        texts[key] = (number, text)
    return texts


def _parse_at(text: str, record: int, side: Optional[str] = None) -> Translation:
    try:
        return Translation.parse(text)
    except ParseError as exc:
        raise exc.at_record(record, side) from exc


class Dictionary(Mapping):
    """Immutable mapping from source translations to optional destinations."""

    def __init__(self, entries: Optional[Entries] = None) -> None:
        self._entries: Entries = dict(entries or {})
        self._template_cache: Optional[List[Tuple[Translation, Skeleton]]] = None

    @classmethod
    def from_source(cls, rows: Iterable[Row], extract: Extractor) -> "Dictionary":
        """Collect the source texts of rows, each without a destination yet."""

        entries: Entries = {}
        for number, text in _extract_all(rows, extract).values():
            entries[_parse_at(text, number)] = None
        logger.info("Built dictionary with %d source entries.", len(entries))
        return cls(entries)

    @classmethod
    def from_source_and_destination(
        cls,
        source_rows: Iterable[Row],
        destination_rows: Iterable[Row],
        extract: Extractor,
    ) -> "Dictionary":
        """Join source and destination rows on their extraction key.

        A key missing from the destination rows, or joined to an empty
        destination text, maps to None. Parse errors carry the side of the
        record that failed.
        """

        sources = _extract_all(source_rows, extract, "source")
        destinations = _extract_all(destination_rows, extract, "destination")

        entries: Entries = {}
        missing = 0
        for key, (number, text) in sources.items():
            source = _parse_at(text, number, "source")
            if key not in destinations or not destinations[key][1]:
                missing += 1
                entries[source] = None
                continue
            destination_number, destination = destinations[key]
            entries[source] = _parse_at(destination, destination_number, "destination")
        if missing:
            logger.info("%d source entries have no destination text.", missing)
        logger.info("Built dictionary with %d entries.", len(entries))
        return cls(entries)

    @classmethod
    def from_existing_dictionary(cls, rows: Iterable[Row]) -> "Dictionary":
        """Load two-column dictionary rows; an empty value means no destination."""

        entries: Entries = {}
        for number, row in enumerate(rows, start=1):
            key_text, value_text = _extract(row, dictionary_entry, number)
            key = _parse_at(key_text, number)
            entries[key] = _parse_at(value_text, number) if value_text else None
        logger.info("Loaded dictionary with %d entries.", len(entries))
        return cls(entries)

    def merge(self, other: "Dictionary") -> "Dictionary":
        """Union of both dictionaries; entries of other win on collision."""

        entries = dict(self._entries)
        for key, value in other.items():
            if key in entries and entries[key] != value:
                logger.debug("Merge overwrites the value of %r.", key)
            entries[key] = value
        return Dictionary(entries)

    def swap(self) -> "Dictionary":
        """Exchange keys and values, dropping entries without a value."""

        entries: Entries = {}
        dropped = 0
        for key, value in self._entries.items():
            if value is None:
                dropped += 1
                continue
            entries[value] = key
        if dropped:
            logger.debug("Swap dropped %d untranslated entries.", dropped)
        return Dictionary(entries)

    def lookup(self, text: Translation) -> Optional[Tuple[Translation, Optional[Translation]]]:
        """Find the entry for a parsed runtime text.

        An exact key wins. Otherwise the template keys whose skeleton fits
        the text compete: the one with the most literal text wins, and keys
        of equal literal length are tried in sorted order.
        """

        if text in self._entries:
            return text, self._entries[text]
        runtime_text = text.to_text()
        for key, skeleton in self._templates():
            if skeleton.match(runtime_text) is not None:
                return key, self._entries[key]
        return None

    def translate(
        self,
        rows: Iterable[Row],
        extract: Extractor,
        *,
        strict: bool = False,
    ) -> List[Tuple[Hashable, str]]:
        """Translate the text of every row.

        Unknown texts and entries without a destination produce an empty
        string. A runtime text that does not fit its template raises
        TranslationMismatchError when strict, otherwise it is kept as is.
        """

        results: List[Tuple[Hashable, str]] = []
        for number, row in enumerate(rows, start=1):
            key, text = _extract(row, extract, number)
            found = self.lookup(_parse_at(text, number))
            if found is None or found[1] is None:
                logger.debug("No translation for record %d (%r).", number, text)
                results.append((key, ""))
                continue

            source, template = found
            try:
                results.append((key, template.translate(text, source=source)))
            except TranslationMismatchError as exc:
                if strict:
                    raise
                logger.warning("Record %d kept untranslated: %s", number, exc)
                results.append((key, text))
        return results

    def rows(self) -> List[Tuple[str, str]]:
        """Sorted (key, value) text pairs; a missing value is an empty string."""

        return [
            (key.to_text(), value.to_text() if value is not None else "")
            for key, value in sorted(self._entries.items(), key=lambda item: item[0])
        ]

    def untranslated(self) -> List[Translation]:
        return sorted(key for key, value in self._entries.items() if value is None)

    def _templates(self) -> List[Tuple[Translation, Skeleton]]:
        """Template keys with their skeletons, most literal text first."""

        if self._template_cache is None:
            templates = [
                (key, key.skeleton()) for key in self._entries if key.is_template
            ]
            templates.sort(key=lambda item: (-item[1].literal_length, item[0]))
            self._template_cache = templates
        return self._template_cache

    def __getitem__(self, key: Translation) -> Optional[Translation]:
        return self._entries[key]

    def __iter__(self) -> Iterator[Translation]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Dictionary({len(self._entries)} entries)"
