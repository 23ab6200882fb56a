from __future__ import annotations

from importlib import metadata
from pathlib import Path

import tomllib


def _read_local_version() -> str | None:
    try:
        pyproject_path = Path(__file__).resolve().parents[2] / "pyproject.toml"
    except IndexError:  # pragma: no cover
        return None
    try:
        with pyproject_path.open("rb") as fh:
            data = tomllib.load(fh)
    except (FileNotFoundError, tomllib.TOMLDecodeError):
        return None
    return data.get("project", {}).get("version")


try:
    __version__ = metadata.version("furi")
except metadata.PackageNotFoundError:
    __version__ = _read_local_version() or "0.0.0+unknown"


from .anchors import Anchor, format_furi_data, parse_furi_data  # noqa: E402
from .characters import CharClass, classify, contains_kanji, is_kanji  # noqa: E402
from .core import (  # noqa: E402
    Segment,
    clear_cache,
    combine_furi,
    combine_furi_pairs,
    segments_to_pairs,
    set_debug_logging,
)
from .runs import Run, segment_runs  # noqa: E402

__all__ = [
    "__version__",
    "Anchor",
    "CharClass",
    "Run",
    "Segment",
    "classify",
    "clear_cache",
    "combine_furi",
    "combine_furi_pairs",
    "contains_kanji",
    "format_furi_data",
    "is_kanji",
    "parse_furi_data",
    "segment_runs",
    "segments_to_pairs",
    "set_debug_logging",
]
