"""Current competency state, one record per (employee, skill).

Writes go through a single ``find_one_and_update(upsert=True)`` so a record is
either created or replaced in one atomic step. The unique index on
``(employee, skillName)`` (see ``hr2.db.ensure_indexes``) guarantees there is
never more than one record per pair.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from bson import ObjectId
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from hr2.models import Competency
from hr2.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def upsert_competency(
    db,
    *,
    employee_id: ObjectId,
    skill_name: str,
    category: str,
    score: int,
    level: str,
    assessed_by: ObjectId | None = None,
    notes: str | None = None,
    detailed_scores: dict[str, int] | None = None,
    assessed_at: datetime | None = None,
) -> Competency:
    now = utc_now()
    fields: dict[str, Any] = {
        "category": category,
        "score": score,
        "level": level,
        "assessedAt": assessed_at or now,
        "assessedBy": assessed_by,
        "notes": notes or "",
        "detailedScores": detailed_scores,
        "updatedAt": now,
    }

    key = {"employee": employee_id, "skillName": skill_name}
    update = {"$set": fields, "$setOnInsert": {"createdAt": now}}

    try:
        doc = db.employee_competencies.find_one_and_update(
            key, update, upsert=True, return_document=ReturnDocument.AFTER
        )
    except DuplicateKeyError:
        # Two first-time upserts raced on the unique index; the loser's retry
        # now matches the winner's record and replaces it.
        logger.info("competency upsert retry employee=%s skill=%s", employee_id, skill_name)
        doc = db.employee_competencies.find_one_and_update(
            key, update, upsert=True, return_document=ReturnDocument.AFTER
        )

    logger.info(
        "competency_upserted employee=%s skill=%s score=%s level=%s", employee_id, skill_name, score, level
    )
    return Competency.from_document(doc)


def get_competency(db, employee_id: ObjectId, skill_name: str) -> Competency | None:
    doc = db.employee_competencies.find_one({"employee": employee_id, "skillName": skill_name})
    return Competency.from_document(doc) if doc else None


def list_competencies(db, employee_id: ObjectId) -> list[Competency]:
    cursor = db.employee_competencies.find({"employee": employee_id}).sort(
        [("category", ASCENDING), ("skillName", ASCENDING)]
    )
    return [Competency.from_document(doc) for doc in cursor]


def list_competencies_for_employees(db, employee_ids: list[ObjectId]) -> list[Competency]:
    if not employee_ids:
        return []
    cursor = db.employee_competencies.find({"employee": {"$in": employee_ids}})
    return [Competency.from_document(doc) for doc in cursor]
