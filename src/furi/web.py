from __future__ import annotations

import os
from dataclasses import dataclass, field

from fastapi import Body, FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse

from . import __version__
from .anchors import FuriData
from .core import DEFAULT_CACHE_SIZE, combine_furi_pairs, configure_cache

__all__ = ["WebConfig", "create_app"]


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


@dataclass
class WebConfig:
    host: str = field(default_factory=lambda: os.environ.get("FURI_HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: _env_int("FURI_PORT", 2047))
    cache_size: int = field(default_factory=lambda: _env_int("FURI_CACHE_SIZE", DEFAULT_CACHE_SIZE))
    max_word_length: int = 256
    max_batch_size: int = 1000


def create_app(config: WebConfig | None = None) -> FastAPI:
    config = config or WebConfig()
    configure_cache(config.cache_size)

    app = FastAPI(title="furi")
    app.state.config = config

    def _check_word_length(word: str) -> None:
        if len(word) > config.max_word_length:
            raise HTTPException(
                status_code=413,
                detail=f"word exceeds {config.max_word_length} characters.",
            )

    def _item_from_payload(payload: object) -> tuple[str, str, FuriData]:
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Invalid payload.")
        word = payload.get("word")
        if not isinstance(word, str):
            raise HTTPException(status_code=400, detail="word is required.")
        reading = payload.get("reading")
        if reading is None:
            reading = ""
        elif not isinstance(reading, str):
            raise HTTPException(status_code=400, detail="reading must be a string.")
        furi = payload.get("furi")
        if furi is not None and not isinstance(furi, (str, dict)):
            raise HTTPException(status_code=400, detail="furi must be a string or an object.")
        _check_word_length(word)
        return word, reading, furi

    def _result_payload(word: str, reading: str, furi: FuriData) -> dict[str, object]:
        pairs = combine_furi_pairs(word, reading, furi)
        return {
            "word": word,
            "reading": reading,
            "pairs": [[furigana, text] for furigana, text in pairs],
        }

    @app.get("/api/health")
    def api_health() -> JSONResponse:
        return JSONResponse({"status": "ok", "version": __version__})

    @app.get("/api/furigana")
    def api_furigana(
        word: str = Query(...),
        reading: str = Query(""),
        furi: str = Query(""),
    ) -> JSONResponse:
        _check_word_length(word)
        return JSONResponse(_result_payload(word, reading, furi or None))

    @app.post("/api/furigana")
    def api_furigana_post(payload: dict[str, object] = Body(...)) -> JSONResponse:
        word, reading, furi = _item_from_payload(payload)
        return JSONResponse(_result_payload(word, reading, furi))

    @app.post("/api/furigana/batch")
    def api_furigana_batch(payload: dict[str, object] = Body(...)) -> JSONResponse:
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Invalid payload.")
        items = payload.get("items")
        if not isinstance(items, list):
            raise HTTPException(status_code=400, detail="items must be a list.")
        if len(items) > config.max_batch_size:
            raise HTTPException(
                status_code=413,
                detail=f"batch exceeds {config.max_batch_size} items.",
            )
        results = [_result_payload(*_item_from_payload(item)) for item in items]
        return JSONResponse({"results": results})

    return app
