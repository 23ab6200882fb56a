from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Sequence

from .anchors import Anchor
from .characters import katakana_to_hiragana
from .runs import Run

__all__ = [
    "Segment",
    "align_explicit",
    "align_fallback",
    "set_debug_logging",
]

_DEBUG_LOG = os.environ.get("FURI_DEBUG", "").strip().lower() in {"1", "true", "yes"}


def set_debug_logging(enabled: bool) -> None:
    global _DEBUG_LOG
    _DEBUG_LOG = enabled


def _debug_log(message: str) -> None:
    if _DEBUG_LOG:
        print(f"[furi debug] {message}")


@dataclass(frozen=True)
class Segment:
    """One ruby unit: ``text`` rendered plain when ``furigana`` is empty."""

    furigana: str
    text: str

    def as_pair(self) -> tuple[str, str]:
        return (self.furigana, self.text)


def _annotated(furigana: str, text: str) -> Segment:
    if not furigana or katakana_to_hiragana(furigana) == katakana_to_hiragana(text):
        return Segment("", text)
    return Segment(furigana, text)


def align_explicit(runs: Sequence[Run], anchors: Sequence[Anchor], word: str) -> list[Segment]:
    """
    Split kanji runs at anchor offsets and attach each anchor's reading.

    An anchor covers its run from ``position`` up to the next anchor inside
    the same run, the run end, or its own range end, whichever comes first.
    Kanji not covered by any anchor come out unannotated; anchors that point
    into non-kanji runs are ignored.
    """
    segments: list[Segment] = []
    for run in runs:
        if not run.is_kanji:
            segments.append(Segment("", run.text))
            continue
        inside = [anchor for anchor in anchors if run.start <= anchor.position < run.end]
        if not inside:
            _debug_log(f"no anchor inside kanji run {run.text!r} of {word!r}")
            segments.append(Segment("", run.text))
            continue
        cursor = run.start
        for idx, anchor in enumerate(inside):
            if anchor.position > cursor:
                segments.append(Segment("", word[cursor : anchor.position]))
            limit = inside[idx + 1].position if idx + 1 < len(inside) else run.end
            if anchor.end is not None:
                limit = min(limit, anchor.end)
            segments.append(Segment(anchor.reading, word[anchor.position : limit]))
            cursor = limit
        if cursor < run.end:
            segments.append(Segment("", word[cursor : run.end]))
    return segments


def align_fallback(runs: Sequence[Run], reading: str, word: str) -> list[Segment]:
    """
    Derive furigana for each kanji run by diffing the word against ``reading``.

    The reading is consumed left to right. A kanji run takes everything up
    to the leftmost occurrence of the following kana run; the last run takes
    the remainder. Repeated syllables can make the leftmost match split a
    word too early, which is accepted rather than searched around.
    """
    if word == reading or not any(run.is_kanji for run in runs):
        return [Segment("", word)]

    folded = katakana_to_hiragana(reading)
    segments: list[Segment] = []
    pos = 0
    for idx, run in enumerate(runs):
        if not run.is_kanji:
            segments.append(Segment("", run.text))
            pos = min(pos + len(run.text), len(reading))
            continue
        following = runs[idx + 1] if idx + 1 < len(runs) else None
        if following is None:
            furigana = reading[pos:]
            pos = len(reading)
        else:
            found = reading.find(following.text, pos)
            if found < 0:
                found = folded.find(katakana_to_hiragana(following.text), pos)
            if found < 0:
                _debug_log(
                    f"{following.text!r} not found in reading {reading!r} after {pos}; "
                    f"giving the remainder to {run.text!r}"
                )
                furigana = reading[pos:]
                pos = len(reading)
            else:
                furigana = reading[pos:found]
                pos = found
        segments.append(_annotated(furigana, run.text))
    return segments
