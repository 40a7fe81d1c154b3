from __future__ import annotations

import pytest

from hr2.config import get_config


def test_testing_config_defaults(monkeypatch):
    monkeypatch.setenv("ENV", "testing")
    monkeypatch.delenv("MONGODB_URI", raising=False)
    monkeypatch.delenv("DEFAULT_PASSING_SCORE", raising=False)
    cfg = get_config()
    assert cfg.TESTING is True
    assert cfg.MONGODB_URI.startswith("mongomock://")
    assert cfg.DEFAULT_PASSING_SCORE == 70


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("ENV", "development")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("DEFAULT_PASSING_SCORE", "60")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    cfg = get_config()
    assert cfg.CORS_ORIGINS == ["http://a.test", "http://b.test"]
    assert cfg.DEFAULT_PASSING_SCORE == 60
    assert cfg.LOG_LEVEL == "DEBUG"


def test_production_requires_secret(monkeypatch):
    monkeypatch.setenv("ENV", "production")
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(RuntimeError):
        get_config()


def test_passing_score_must_be_a_percentage(monkeypatch):
    monkeypatch.setenv("ENV", "development")
    monkeypatch.setenv("DEFAULT_PASSING_SCORE", "120")
    with pytest.raises(RuntimeError):
        get_config()
