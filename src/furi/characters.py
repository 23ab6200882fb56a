from __future__ import annotations

from enum import Enum

__all__ = [
    "CharClass",
    "classify",
    "is_kanji",
    "contains_kanji",
    "katakana_to_hiragana",
]

# Marks that behave like kanji inside dictionary headwords (人々, 〆切, 一ヶ月).
_KANJI_LIKE_MARKS = frozenset("々〆ヵヶ")

_KATAKANA_TO_HIRAGANA = str.maketrans(
    {chr(code): chr(code - 0x60) for code in range(ord("ァ"), ord("ヶ") + 1)}
    | {"ヽ": "ゝ", "ヾ": "ゞ"}
)


class CharClass(str, Enum):
    KANJI = "kanji"
    OTHER = "other"


def is_kanji(ch: str) -> bool:
    if not ch:
        return False
    code = ord(ch)
    return (
        0x4E00 <= code <= 0x9FFF  # CJK Unified Ideographs
        or 0x3400 <= code <= 0x4DBF  # Extension A
        or 0x20000 <= code <= 0x2A6DF  # Extension B
        or 0x2A700 <= code <= 0x2B73F  # Extension C
        or 0x2B740 <= code <= 0x2B81F  # Extension D
        or 0x2B820 <= code <= 0x2CEAF  # Extension E
        or 0x2CEB0 <= code <= 0x2EBEF  # Extension F
        or 0x30000 <= code <= 0x3134F  # Extension G
        or 0xF900 <= code <= 0xFAFF  # Compatibility Ideographs
        or 0x2F800 <= code <= 0x2FA1F  # Compatibility Supplement
        or ch in _KANJI_LIKE_MARKS
    )


def classify(ch: str) -> CharClass:
    """Classify a single character as kanji or anything else."""
    return CharClass.KANJI if is_kanji(ch) else CharClass.OTHER


def contains_kanji(text: str) -> bool:
    return any(is_kanji(ch) for ch in text)


def katakana_to_hiragana(text: str) -> str:
    """
    Fold full-width katakana to hiragana, one character for one character.

    The length of the result always equals the length of ``text`` so offsets
    found in the folded string are valid in the original.
    """
    return text.translate(_KATAKANA_TO_HIRAGANA)
