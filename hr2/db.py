from __future__ import annotations

import logging
import threading
from datetime import timezone

from flask import Flask
from pymongo import ASCENDING, DESCENDING, MongoClient

logger = logging.getLogger(__name__)

_client: MongoClient | None = None
_client_lock = threading.Lock()


def _create_client(mongodb_uri: str, *, server_selection_timeout_ms: int) -> MongoClient:
    if mongodb_uri.startswith("mongomock://"):
        import mongomock  # type: ignore[import-not-found]

        return mongomock.MongoClient(tz_aware=True, tzinfo=timezone.utc)

    return MongoClient(
        mongodb_uri,
        serverSelectionTimeoutMS=server_selection_timeout_ms,
        tz_aware=True,
        tzinfo=timezone.utc,
        retryWrites=True,
    )


def get_client(app: Flask) -> MongoClient:
    global _client
    cfg = app.config["CFG"]
    with _client_lock:
        if _client is None:
            _client = _create_client(cfg.MONGODB_URI, server_selection_timeout_ms=cfg.MONGO_SERVER_SELECTION_TIMEOUT_MS)
    return _client


def get_db(app: Flask):
    cfg = app.config["CFG"]
    return get_client(app)[cfg.DB_NAME]


def ping_db(db) -> bool:
    try:
        db.command("ping")
        return True
    except Exception:
        try:
            # mongomock does not implement every admin command.
            _ = db.list_collection_names()
            return True
        except Exception:
            return False


def ensure_indexes(db) -> None:
    db.users.create_index([("email", ASCENDING)], unique=True, name="users_email_unique")
    db.assessments.create_index([("skillName", ASCENDING)], unique=True, name="assessments_skillName_unique")
    db.assessments.create_index(
        [("isActive", ASCENDING), ("category", ASCENDING), ("skillName", ASCENDING)],
        name="assessments_active_category_skill",
    )
    db.assessment_results.create_index(
        [("employee", ASCENDING), ("assessment", ASCENDING)], name="results_employee_assessment"
    )
    db.assessment_results.create_index(
        [("employee", ASCENDING), ("skillName", ASCENDING)], name="results_employee_skill"
    )
    db.assessment_results.create_index([("submittedAt", DESCENDING)], name="results_submittedAt_desc")
    # One current-state record per (employee, skill); the upsert relies on it.
    db.employee_competencies.create_index(
        [("employee", ASCENDING), ("skillName", ASCENDING)],
        unique=True,
        name="competencies_employee_skill_unique",
    )


def init_mongo(app: Flask) -> None:
    db = get_db(app)
    app.extensions["mongo_db"] = db
    ensure_indexes(db)
    logger.info("mongo ready db=%s", app.config["CFG"].DB_NAME)


def reset_client_for_tests() -> None:
    global _client
    with _client_lock:
        _client = None
