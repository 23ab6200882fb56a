from __future__ import annotations

import json

import pytest
from fastapi import HTTPException

from furi import __version__
from furi.core import DEFAULT_CACHE_SIZE, configure_cache
from furi.web import WebConfig, create_app


@pytest.fixture(autouse=True)
def _reset_cache():
    yield
    configure_cache(DEFAULT_CACHE_SIZE)


def _find_route(app, path: str, method: str):
    method = method.upper()
    for route in app.router.routes:
        if getattr(route, "path", None) == path and method in getattr(route, "methods", set()):
            return route.endpoint
    raise RuntimeError(f"Route {method} {path} not found")


def test_health_reports_version() -> None:
    app = create_app(WebConfig())
    response = _find_route(app, "/api/health", "GET")()
    assert json.loads(response.body) == {"status": "ok", "version": __version__}


def test_get_furigana_with_compact_data() -> None:
    app = create_app(WebConfig())
    endpoint = _find_route(app, "/api/furigana", "GET")
    response = endpoint(word="お世辞", reading="おせじ", furi="1:せ;2:じ")
    assert response.status_code == 200
    assert json.loads(response.body) == {
        "word": "お世辞",
        "reading": "おせじ",
        "pairs": [["", "お"], ["せ", "世"], ["じ", "辞"]],
    }


def test_get_furigana_falls_back_to_reading() -> None:
    app = create_app(WebConfig())
    endpoint = _find_route(app, "/api/furigana", "GET")
    payload = json.loads(endpoint(word="お見舞い", reading="おみまい", furi="").body)
    assert payload["pairs"] == [["", "お"], ["みま", "見舞"], ["", "い"]]


def test_post_accepts_object_furigana() -> None:
    app = create_app(WebConfig())
    endpoint = _find_route(app, "/api/furigana", "POST")
    response = endpoint({"word": "漢字", "furi": {"0": "かん", "1": "じ"}})
    payload = json.loads(response.body)
    assert payload["reading"] == ""
    assert payload["pairs"] == [["かん", "漢"], ["じ", "字"]]


@pytest.mark.parametrize(
    "payload",
    [
        {"reading": "かんじ"},
        {"word": 5},
        {"word": "漢字", "reading": ["かんじ"]},
        {"word": "漢字", "furi": 3},
    ],
)
def test_post_rejects_malformed_payload(payload) -> None:
    app = create_app(WebConfig())
    endpoint = _find_route(app, "/api/furigana", "POST")
    with pytest.raises(HTTPException) as excinfo:
        endpoint(payload)
    assert excinfo.value.status_code == 400


def test_long_words_are_rejected() -> None:
    app = create_app(WebConfig(max_word_length=3))
    get_endpoint = _find_route(app, "/api/furigana", "GET")
    post_endpoint = _find_route(app, "/api/furigana", "POST")
    with pytest.raises(HTTPException) as excinfo:
        get_endpoint(word="読み書き", reading="", furi="")
    assert excinfo.value.status_code == 413
    with pytest.raises(HTTPException) as excinfo:
        post_endpoint({"word": "読み書き"})
    assert excinfo.value.status_code == 413


def test_batch_annotates_each_item() -> None:
    app = create_app(WebConfig())
    endpoint = _find_route(app, "/api/furigana/batch", "POST")
    response = endpoint(
        {
            "items": [
                {"word": "今日", "reading": "きょう", "furi": "0:きょう"},
                {"word": "大人しい", "reading": "おとなしい"},
                {"word": "test", "reading": "test"},
            ]
        }
    )
    results = json.loads(response.body)["results"]
    assert [result["pairs"] for result in results] == [
        [["きょう", "今日"]],
        [["おとな", "大人"], ["", "しい"]],
        [["", "test"]],
    ]


def test_batch_limits() -> None:
    app = create_app(WebConfig(max_batch_size=1))
    endpoint = _find_route(app, "/api/furigana/batch", "POST")
    with pytest.raises(HTTPException) as excinfo:
        endpoint({"items": [{"word": "今日"}, {"word": "明日"}]})
    assert excinfo.value.status_code == 413
    with pytest.raises(HTTPException) as excinfo:
        endpoint({"items": "今日"})
    assert excinfo.value.status_code == 400


def test_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("FURI_PORT", "8123")
    monkeypatch.setenv("FURI_CACHE_SIZE", "0")
    monkeypatch.setenv("FURI_HOST", "0.0.0.0")
    config = WebConfig()
    assert (config.host, config.port, config.cache_size) == ("0.0.0.0", 8123, 0)
    monkeypatch.setenv("FURI_PORT", "not-a-port")
    assert WebConfig().port == 2047
