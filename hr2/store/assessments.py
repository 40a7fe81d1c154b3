from __future__ import annotations

from typing import Any

from bson import ObjectId
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from hr2.models import Assessment
from hr2.utils.datetime import utc_now
from hr2.utils.errors import conflict


def get_assessment(db, assessment_id: ObjectId) -> Assessment | None:
    doc = db.assessments.find_one({"_id": assessment_id})
    return Assessment.from_document(doc) if doc else None


def list_assessments(db, *, active_only: bool) -> list[Assessment]:
    query: dict[str, Any] = {"isActive": True} if active_only else {}
    cursor = db.assessments.find(query).sort([("category", ASCENDING), ("skillName", ASCENDING)])
    return [Assessment.from_document(doc) for doc in cursor]


def insert_assessment(db, fields: dict[str, Any]) -> Assessment:
    now = utc_now()
    doc = {**fields, "createdAt": now, "updatedAt": now}
    try:
        res = db.assessments.insert_one(doc)
    except DuplicateKeyError as e:
        raise conflict("Assessment for this skill already exists") from e
    doc["_id"] = res.inserted_id
    return Assessment.from_document(doc)


def update_assessment(db, assessment_id: ObjectId, fields: dict[str, Any]) -> Assessment | None:
    try:
        doc = db.assessments.find_one_and_update(
            {"_id": assessment_id},
            {"$set": {**fields, "updatedAt": utc_now()}},
            return_document=ReturnDocument.AFTER,
        )
    except DuplicateKeyError as e:
        raise conflict("Assessment for this skill already exists") from e
    return Assessment.from_document(doc) if doc else None


def delete_assessment(db, assessment_id: ObjectId) -> bool:
    return db.assessments.delete_one({"_id": assessment_id}).deleted_count == 1
