from __future__ import annotations

from furi.anchors import Anchor, format_furi_data, parse_furi_data


def test_string_encoding_parses_in_position_order() -> None:
    assert parse_furi_data("2:じ;1:せ") == [Anchor(1, "せ"), Anchor(2, "じ")]


def test_mapping_and_string_encodings_agree() -> None:
    expected = parse_furi_data("0:かん;1:じ", word_length=2)
    assert parse_furi_data({0: "かん", 1: "じ"}, word_length=2) == expected
    assert parse_furi_data({"1": "じ", "0": "かん"}, word_length=2) == expected


def test_malformed_entries_are_dropped_individually() -> None:
    data = "x:あ;3:い;:う;5;-1:え;2: ;1:"
    assert parse_furi_data(data, word_length=4) == [Anchor(3, "い")]


def test_out_of_range_positions_are_dropped() -> None:
    assert parse_furi_data("0:かん;9:じ", word_length=2) == [Anchor(0, "かん")]
    assert parse_furi_data({0: "かん", 2: "じ", -1: "x"}, word_length=2) == [Anchor(0, "かん")]


def test_later_entry_wins_for_duplicate_position() -> None:
    assert parse_furi_data("1:あ;0:か;1:い") == [Anchor(0, "か"), Anchor(1, "い")]


def test_whitespace_is_trimmed() -> None:
    assert parse_furi_data(" 0 : かん ; 1:じ ") == [Anchor(0, "かん"), Anchor(1, "じ")]


def test_range_entries_carry_exclusive_end() -> None:
    assert parse_furi_data("0-1:きょう", word_length=3) == [Anchor(0, "きょう", end=2)]
    assert parse_furi_data("2-1:きょう", word_length=3) == []
    assert parse_furi_data("0-5:きょう", word_length=3) == []


def test_empty_or_unsupported_data_yields_no_anchors() -> None:
    assert parse_furi_data(None) == []
    assert parse_furi_data("") == []
    assert parse_furi_data({}) == []
    assert parse_furi_data(42) == []  # type: ignore[arg-type]
    assert parse_furi_data({True: "x", 0: 5}) == []


def test_format_normalizes_to_compact_string() -> None:
    anchors = parse_furi_data({2: "じ", 0: "かん"})
    assert format_furi_data(anchors) == "0:かん;2:じ"
    assert format_furi_data(parse_furi_data("2:じ;0-1:きょう")) == "0-1:きょう;2:じ"
    assert format_furi_data([]) == ""
