from __future__ import annotations

import os
import time

from flask import Flask, g, request

_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}


def client_ip() -> str:
    ip = request.headers.get("X-Forwarded-For", request.remote_addr or "")
    if ip and "," in ip:
        ip = ip.split(",", 1)[0].strip()
    return ip


def init_request_context(app: Flask) -> None:
    @app.before_request
    def _start():
        incoming = str(request.headers.get("X-Request-ID") or "").strip()
        g.request_id = incoming[:64] or os.urandom(8).hex()
        g.start_ts = time.monotonic()

    @app.after_request
    def _headers(resp):
        rid = getattr(g, "request_id", "")
        if rid:
            resp.headers["X-Request-ID"] = rid

        for name, value in _SECURITY_HEADERS.items():
            resp.headers.setdefault(name, value)

        # Graded breakdowns and tokens must not be cached by intermediaries.
        if request.path.startswith("/api/"):
            resp.headers.setdefault("Cache-Control", "no-store")

        cfg = app.config["CFG"]
        is_https = request.is_secure or str(request.headers.get("X-Forwarded-Proto") or "").lower() == "https"
        if cfg.IS_PRODUCTION and is_https:
            resp.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return resp
