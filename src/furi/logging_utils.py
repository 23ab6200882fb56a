from __future__ import annotations

from copy import copy, deepcopy
from typing import Any
from urllib.parse import unquote, unquote_plus

from uvicorn.config import LOGGING_CONFIG
from uvicorn.logging import AccessFormatter as UvicornAccessFormatter


def decode_request_target(value: str) -> str:
    """Percent-decode a request target so kana in query strings stay readable."""
    path, sep, query = value.partition("?")
    try:
        decoded_path = unquote(path, encoding="utf-8", errors="replace")
        decoded_query = unquote_plus(query, encoding="utf-8", errors="replace")
    except Exception:
        return value
    return f"{decoded_path}{sep}{decoded_query}"


class Utf8AccessFormatter(UvicornAccessFormatter):
    """Uvicorn access log formatter that prints decoded UTF-8 request targets."""

    def formatMessage(self, record):  # type: ignore[override]
        try:
            client_addr, method, full_path, http_version, status_code = record.args
        except Exception:
            return super().formatMessage(record)
        decoded = decode_request_target(full_path) if isinstance(full_path, str) else full_path
        new_record = copy(record)
        new_record.args = (client_addr, method, decoded, http_version, status_code)
        return super().formatMessage(new_record)


def build_uvicorn_log_config(debug: bool = False) -> dict[str, Any]:
    """Return a uvicorn logging config using Utf8AccessFormatter for access lines."""
    config = deepcopy(LOGGING_CONFIG)
    formatter = config.get("formatters", {}).get("access")
    if isinstance(formatter, dict):
        formatter["()"] = "furi.logging_utils.Utf8AccessFormatter"
    if debug:
        for logger in config.get("loggers", {}).values():
            if isinstance(logger, dict) and "level" in logger:
                logger["level"] = "DEBUG"
    return config
