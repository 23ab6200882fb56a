from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Union

__all__ = [
    "Anchor",
    "FuriData",
    "parse_furi_data",
    "format_furi_data",
]

FuriData = Union[str, Mapping[object, object], None]


@dataclass(frozen=True)
class Anchor:
    """
    Known reading pinned to an offset of the word.

    ``position`` is the first character the reading covers. ``end`` is only
    set for range entries (``"0-1:きょう"``) and is exclusive; without it the
    reading extends until the next anchor or the end of the kanji run.
    """

    position: int
    reading: str
    end: int | None = None


def _parse_index(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    if not stripped or not stripped.isdecimal():
        return None
    return int(stripped)


def _parse_span(value: str) -> tuple[int, int | None] | None:
    start_text, sep, end_text = value.partition("-")
    start = _parse_index(start_text)
    if start is None:
        return None
    if not sep:
        return start, None
    last = _parse_index(end_text)
    if last is None or last < start:
        return None
    return start, last + 1


def _iter_string_entries(data: str) -> Iterable[tuple[int, int | None, object]]:
    for piece in data.split(";"):
        indexes, sep, content = piece.partition(":")
        if not sep:
            continue
        span = _parse_span(indexes)
        if span is None:
            continue
        yield span[0], span[1], content


def _iter_mapping_entries(data: Mapping[object, object]) -> Iterable[tuple[int, int | None, object]]:
    for key, content in data.items():
        position = _parse_index(key)
        if position is None:
            continue
        yield position, None, content


def parse_furi_data(data: FuriData, word_length: int | None = None) -> list[Anchor]:
    """
    Normalize explicit furigana data into anchors sorted by position.

    ``data`` is either the compact ``"idx:reading;idx:reading"`` string or a
    mapping from index to reading. Entries with an unparsable index, an
    empty reading, or a position outside ``[0, word_length)`` are dropped
    one by one. When two entries share a position the later one wins.
    """
    if not data:
        return []
    if isinstance(data, str):
        entries = _iter_string_entries(data)
    elif isinstance(data, Mapping):
        entries = _iter_mapping_entries(data)
    else:
        return []

    by_position: dict[int, Anchor] = {}
    for position, end, content in entries:
        if not isinstance(content, str):
            continue
        reading = content.strip()
        if not reading:
            continue
        if word_length is not None:
            if position >= word_length:
                continue
            if end is not None and end > word_length:
                continue
        by_position[position] = Anchor(position=position, reading=reading, end=end)
    return [by_position[position] for position in sorted(by_position)]


def format_furi_data(anchors: Iterable[Anchor]) -> str:
    parts: list[str] = []
    for anchor in sorted(anchors, key=lambda item: item.position):
        if anchor.end is not None:
            parts.append(f"{anchor.position}-{anchor.end - 1}:{anchor.reading}")
        else:
            parts.append(f"{anchor.position}:{anchor.reading}")
    return ";".join(parts)
