from __future__ import annotations

import pytest

from hr2.utils.errors import ApiError
from hr2.utils.rate_limiter import FixedWindowRateLimiter, parse_limit


def test_parse_limit():
    assert parse_limit("20 per minute") == (20, 60)
    assert parse_limit("5 per second") == (5, 1)
    assert parse_limit("100 PER hour") == (100, 3600)
    assert parse_limit("garbage") == (300, 60)


def test_limiter_blocks_after_allowance():
    limiter = FixedWindowRateLimiter()
    assert limiter.hit("k", "2 per hour") == 1
    assert limiter.hit("k", "2 per hour") == 0
    with pytest.raises(ApiError) as exc:
        limiter.hit("k", "2 per hour")
    assert exc.value.status == 429

    limiter.reset()
    assert limiter.hit("k", "2 per hour") == 1


@pytest.fixture()
def tight_submit_limit(monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_SUBMIT", "3 per hour")


def test_submit_route_is_rate_limited(tight_submit_limit, app_client):
    app, client = app_client
    assert app.config["CFG"].RATE_LIMIT_SUBMIT == "3 per hour"

    for _ in range(3):
        client.post("/api/v1/assessments/submit", json={})
    res = client.post("/api/v1/assessments/submit", json={})
    assert res.status_code == 429
    assert res.get_json()["error"]["code"] == "RATE_LIMITED"
