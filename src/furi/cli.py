from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Iterable, TextIO

import uvicorn
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from . import __version__
from .anchors import FuriData
from .core import DEFAULT_CACHE_SIZE, combine_furi, segments_to_pairs, set_debug_logging
from .logging_utils import build_uvicorn_log_config
from .web import WebConfig, create_app


PARTIAL_SUFFIX = ".partial"


class FuriDataError(ValueError):
    """Raised when furigana data given on the command line cannot be decoded."""


def _coerce_furi(value: str | None) -> FuriData:
    if value is None:
        return None
    stripped = value.strip()
    if not stripped:
        return None
    if not stripped.startswith("{"):
        return stripped
    try:
        data = json.loads(stripped)
    except json.JSONDecodeError as exc:
        raise FuriDataError(f"Invalid JSON furigana data: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise FuriDataError("JSON furigana data must be an object.")
    return data


def _add_version_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"furi {__version__}",
    )


def _add_debug_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print which alignment path each word takes.",
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description=(
            "Split a Japanese word into furigana/text segments. "
            "Use `furi batch` for TSV files and `furi web` for the HTTP API; "
            "to annotate a word spelled batch or web, put it after --, e.g. `furi -- web`."
        ),
    )
    _add_version_flag(ap)
    _add_debug_flag(ap)
    ap.add_argument("word", help="Word to annotate, e.g. お見舞い")
    ap.add_argument("reading", nargs="?", default="", help="Kana reading of the word.")
    ap.add_argument(
        "-f",
        "--furi",
        help='Explicit furigana as "idx:reading;idx:reading" or a JSON object ({"0": "かん"}).',
    )
    ap.add_argument(
        "--json",
        action="store_true",
        help="Print the [furigana, text] pairs as JSON instead of a table.",
    )
    return ap


def build_batch_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Annotate TSV lines (word<TAB>reading[<TAB>furi]) into JSON lines.",
    )
    _add_version_flag(ap)
    _add_debug_flag(ap)
    ap.add_argument("input", help="TSV file to read, or - for stdin.")
    ap.add_argument(
        "-o",
        "--output",
        default="-",
        help=(
            "Where to write JSON lines (default: stdout). A file is only replaced once "
            "every line is annotated; stdout receives lines as they are produced."
        ),
    )
    return ap


def build_web_parser() -> argparse.ArgumentParser:
    defaults = WebConfig()
    ap = argparse.ArgumentParser(description="Serve the furigana HTTP API.")
    _add_version_flag(ap)
    _add_debug_flag(ap)
    ap.add_argument(
        "--host",
        default=defaults.host,
        help=f"Host interface for the web server (default: {defaults.host}).",
    )
    ap.add_argument(
        "--port",
        type=int,
        default=defaults.port,
        help=f"Port for the web server (default: {defaults.port}).",
    )
    ap.add_argument(
        "--cache-size",
        type=int,
        default=defaults.cache_size,
        help=f"Memoized results to keep; 0 disables the cache (default: {DEFAULT_CACHE_SIZE}).",
    )
    ap.add_argument(
        "--max-word-length",
        type=int,
        default=defaults.max_word_length,
        help=f"Reject longer words with HTTP 413 (default: {defaults.max_word_length}).",
    )
    ap.add_argument(
        "--max-batch-size",
        type=int,
        default=defaults.max_batch_size,
        help=f"Reject larger batches with HTTP 413 (default: {defaults.max_batch_size}).",
    )
    return ap


def _print_segments_table(word: str, pairs: list[tuple[str, str]]) -> None:
    table = Table(title=word)
    table.add_column("furigana")
    table.add_column("text")
    for furigana, text in pairs:
        table.add_row(furigana, text)
    Console().print(table)


def _run_word(args: argparse.Namespace) -> int:
    try:
        furi = _coerce_furi(args.furi)
    except FuriDataError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    pairs = segments_to_pairs(combine_furi(args.word, args.reading, furi))
    if args.json:
        print(json.dumps([list(pair) for pair in pairs], ensure_ascii=False))
    else:
        _print_segments_table(args.word, pairs)
    return 0


def _parse_batch_line(line: str, line_no: int) -> tuple[str, str, FuriData] | None:
    stripped = line.rstrip("\r\n")
    if not stripped.strip() or stripped.lstrip().startswith("#"):
        return None
    parts = stripped.split("\t")
    word = parts[0].strip()
    reading = parts[1].strip() if len(parts) > 1 else ""
    try:
        furi = _coerce_furi(parts[2]) if len(parts) > 2 else None
    except FuriDataError as exc:
        raise FuriDataError(f"line {line_no}: {exc}") from exc
    return word, reading, furi


def _annotate_lines(lines: list[str], out: TextIO, progress: Progress) -> int:
    task_id = progress.add_task("Annotating", total=len(lines))
    written = 0
    for line_no, line in enumerate(lines, start=1):
        entry = _parse_batch_line(line, line_no)
        progress.advance(task_id)
        if entry is None:
            continue
        word, reading, furi = entry
        pairs = segments_to_pairs(combine_furi(word, reading, furi))
        record = {
            "word": word,
            "reading": reading,
            "pairs": [list(pair) for pair in pairs],
        }
        out.write(json.dumps(record, ensure_ascii=False) + "\n")
        written += 1
    return written


def _read_lines(source: str) -> list[str]:
    if source == "-":
        return sys.stdin.readlines()
    path = Path(source).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    return path.read_text(encoding="utf-8").splitlines()


def _run_batch(args: argparse.Namespace) -> int:
    try:
        lines = _read_lines(args.input)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    err_console = Console(stderr=True)
    progress = Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=err_console,
        transient=True,
        disable=not err_console.is_terminal,
    )
    try:
        with progress:
            if args.output == "-":
                written = _annotate_lines(lines, sys.stdout, progress)
            else:
                output_path = Path(args.output).expanduser()
                partial_path = output_path.with_name(output_path.name + PARTIAL_SUFFIX)
                try:
                    with partial_path.open("w", encoding="utf-8") as fh:
                        written = _annotate_lines(lines, fh, progress)
                except BaseException:
                    partial_path.unlink(missing_ok=True)
                    raise
                partial_path.replace(output_path)
    except FuriDataError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    if args.output != "-":
        print(f"Wrote {written} entries to {args.output}", file=sys.stderr)
    return 0


def _run_web(args: argparse.Namespace) -> None:
    config = WebConfig(
        host=args.host,
        port=args.port,
        cache_size=args.cache_size,
        max_word_length=args.max_word_length,
        max_batch_size=args.max_batch_size,
    )
    app = create_app(config)
    print(f"Serving furi API on http://{config.host}:{config.port}/api/furigana")
    print("Press Ctrl+C to stop.\n")
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_config=build_uvicorn_log_config(debug=bool(args.debug)),
    )


def _dispatch(argv: list[str]) -> tuple[argparse.ArgumentParser, str]:
    if argv and argv[0] == "batch":
        return build_batch_parser(), "batch"
    if argv and argv[0] == "web":
        return build_web_parser(), "web"
    return build_parser(), "word"


def main(argv: Iterable[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    parser, command = _dispatch(argv)
    if command == "word" and not argv:
        parser.print_help()
        return 1
    args = parser.parse_args(argv if command == "word" else argv[1:])
    if args.debug:
        set_debug_logging(True)

    if command == "batch":
        return _run_batch(args)
    if command == "web":
        _run_web(args)
        return 0
    return _run_word(args)


if __name__ == "__main__":
    raise SystemExit(main())
