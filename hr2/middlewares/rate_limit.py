from __future__ import annotations

from flask import Flask, g, request

from hr2.middlewares.request_context import client_ip
from hr2.utils.rate_limiter import FixedWindowRateLimiter

limiter = FixedWindowRateLimiter()

_EXEMPT = {"/health", "/version"}


def init_rate_limiting(app: Flask) -> None:
    cfg = app.config["CFG"]

    @app.before_request
    def _rate_limit():
        path = request.path or ""
        if path in _EXEMPT or not path.startswith("/api/v1/"):
            return None

        ip = client_ip()
        if path == "/api/v1/auth/login":
            g.rate_remaining = limiter.hit(f"{ip}:LOGIN", cfg.RATE_LIMIT_LOGIN)
            return None

        limiter.hit(f"{ip}:GLOBAL", cfg.RATE_LIMIT_GLOBAL)
        if path == "/api/v1/assessments/submit" and request.method == "POST":
            g.rate_remaining = limiter.hit(f"{ip}:SUBMIT", cfg.RATE_LIMIT_SUBMIT)
        else:
            g.rate_remaining = limiter.hit(f"{ip}:PATH:{path}", cfg.RATE_LIMIT_DEFAULT)
        return None

    @app.after_request
    def _remaining(resp):
        remaining = getattr(g, "rate_remaining", None)
        if remaining is not None:
            resp.headers["X-RateLimit-Remaining"] = str(remaining)
        return resp
