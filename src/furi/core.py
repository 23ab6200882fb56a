from __future__ import annotations

import os
from functools import lru_cache
from typing import Callable, Iterable

from .align import Segment, _debug_log, align_explicit, align_fallback, set_debug_logging
from .anchors import Anchor, FuriData, parse_furi_data
from .characters import contains_kanji
from .runs import segment_runs

__all__ = [
    "Segment",
    "combine_furi",
    "combine_furi_pairs",
    "segments_to_pairs",
    "configure_cache",
    "clear_cache",
    "cache_info",
    "set_debug_logging",
    "DEFAULT_CACHE_SIZE",
]

DEFAULT_CACHE_SIZE = 4096


def _cache_size_from_env() -> int:
    raw = os.environ.get("FURI_CACHE_SIZE", "").strip()
    if not raw:
        return DEFAULT_CACHE_SIZE
    try:
        return max(0, int(raw))
    except ValueError:
        return DEFAULT_CACHE_SIZE


def _combine(word: str, reading: str, anchors: tuple[Anchor, ...]) -> tuple[Segment, ...]:
    runs = segment_runs(word)
    if anchors:
        _debug_log(f"explicit alignment for {word!r} with {len(anchors)} anchor(s)")
        return tuple(align_explicit(runs, anchors, word))
    if word == reading:
        return (Segment("", word),)
    _debug_log(f"fallback alignment for {word!r} against {reading!r}")
    return tuple(align_fallback(runs, reading, word))


_combine_cached: Callable[[str, str, tuple[Anchor, ...]], tuple[Segment, ...]] = _combine


def configure_cache(maxsize: int) -> None:
    """Replace the memo with one holding ``maxsize`` entries (0 disables it)."""
    global _combine_cached
    if maxsize > 0:
        _combine_cached = lru_cache(maxsize=maxsize)(_combine)
    else:
        _combine_cached = _combine


def clear_cache() -> None:
    cache_clear = getattr(_combine_cached, "cache_clear", None)
    if cache_clear is not None:
        cache_clear()


def cache_info():
    info = getattr(_combine_cached, "cache_info", None)
    return info() if info is not None else None


configure_cache(_cache_size_from_env())


def _as_text(value: object) -> str:
    return value if isinstance(value, str) else ""


def combine_furi(
    word: str | None = None,
    reading: str | None = None,
    furi: FuriData = None,
) -> list[Segment]:
    """
    Split ``word`` into ruby segments.

    Explicit ``furi`` data (compact ``"idx:reading;..."`` string or an
    index-to-reading mapping) always wins over ``reading``; without it the
    reading is aligned against the word's kanji and kana runs. Joining the
    ``text`` of the returned segments reproduces ``word`` exactly, and the
    function never raises on malformed input.
    """
    word = _as_text(word)
    reading = _as_text(reading)
    if not word:
        return []
    if not contains_kanji(word):
        return [Segment("", word)]
    anchors = tuple(parse_furi_data(furi, len(word)))
    return list(_combine_cached(word, reading, anchors))


def segments_to_pairs(segments: Iterable[Segment]) -> list[tuple[str, str]]:
    return [segment.as_pair() for segment in segments]


def combine_furi_pairs(
    word: str | None = None,
    reading: str | None = None,
    furi: FuriData = None,
) -> list[tuple[str, str]]:
    return segments_to_pairs(combine_furi(word, reading, furi))
