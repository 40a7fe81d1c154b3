from __future__ import annotations

import logging
from typing import Any

from flask import Flask, g, jsonify
from werkzeug.exceptions import HTTPException

from hr2.utils.errors import ApiError

logger = logging.getLogger("hr2")


def _error_response(code: str, message: str, status: int, details: Any | None = None):
    payload: dict[str, Any] = {
        "success": False,
        "error": {"code": code, "message": message, "details": details},
    }
    if getattr(g, "request_id", None):
        payload["request_id"] = g.request_id
    return jsonify(payload), status


def init_error_handlers(app: Flask) -> None:
    @app.errorhandler(ApiError)
    def _api_error(err: ApiError):
        if err.status >= 500:
            logger.error("api error code=%s message=%s", err.code, err.message)
        return _error_response(err.code, err.message, err.status, err.details)

    @app.errorhandler(HTTPException)
    def _http_error(err: HTTPException):
        status = int(err.code or 500)
        return _error_response(f"HTTP_{status}", str(err.description or "HTTP error"), status)

    @app.errorhandler(Exception)
    def _unhandled(err: Exception):
        logger.exception("Unhandled exception request_id=%s", getattr(g, "request_id", ""))
        return _error_response("INTERNAL", "Unexpected error", 500)
