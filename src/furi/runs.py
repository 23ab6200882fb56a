from __future__ import annotations

from dataclasses import dataclass

from .characters import CharClass, classify

__all__ = ["Run", "segment_runs"]


@dataclass(frozen=True)
class Run:
    """
    Maximal slice of a word whose characters share one classification.

    ``start``/``end`` are offsets into the word with ``end`` exclusive, so
    ``word[run.start:run.end] == run.text`` always holds.
    """

    kind: CharClass
    start: int
    end: int
    text: str

    @property
    def is_kanji(self) -> bool:
        return self.kind is CharClass.KANJI


def segment_runs(word: str) -> list[Run]:
    runs: list[Run] = []
    if not word:
        return runs
    start = 0
    kind = classify(word[0])
    for idx in range(1, len(word)):
        current = classify(word[idx])
        if current is kind:
            continue
        runs.append(Run(kind=kind, start=start, end=idx, text=word[start:idx]))
        start = idx
        kind = current
    runs.append(Run(kind=kind, start=start, end=len(word), text=word[start:]))
    return runs
