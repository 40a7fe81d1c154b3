import os


def _env_int(name: str, default: int) -> int:
    try:
        return int(str(os.getenv(name, "") or "").strip() or default)
    except ValueError:
        return default


wsgi_app = "hr2:create_app()"
bind = f"0.0.0.0:{_env_int('PORT', 5000)}"

# Each request is independent; scale with workers and threads.
workers = max(1, _env_int("WEB_CONCURRENCY", 2))
threads = max(1, _env_int("PYTHON_THREADS", 4))

timeout = max(10, _env_int("GUNICORN_TIMEOUT", 60))
graceful_timeout = max(5, _env_int("GUNICORN_GRACEFUL_TIMEOUT", 30))
keepalive = max(1, _env_int("GUNICORN_KEEPALIVE", 5))

accesslog = "-"
errorlog = "-"
