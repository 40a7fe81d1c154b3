"""Append-only log of graded submissions."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from bson import ObjectId
from pymongo import DESCENDING

from hr2.grading import GradeResult
from hr2.models import GradingView
from hr2.utils.datetime import utc_now


def insert_result(
    db,
    *,
    employee_id: ObjectId,
    assessment: GradingView,
    grade: GradeResult,
    time_taken: int | None,
    submitted_at: datetime | None = None,
) -> dict[str, Any]:
    doc: dict[str, Any] = {
        "employee": employee_id,
        "assessment": ObjectId(assessment.assessment_id),
        "skillName": assessment.skill_name,
        "category": assessment.category,
        "answers": [row.to_dict() for row in grade.breakdown],
        "score": grade.score,
        "totalQuestions": grade.total_questions,
        "correctAnswers": grade.correct_answers,
        "passed": grade.passed,
        "level": grade.level,
        "timeTaken": time_taken,
        "submittedAt": submitted_at or utc_now(),
    }
    res = db.assessment_results.insert_one(doc)
    doc["_id"] = res.inserted_id
    return doc


def list_results(db, *, employee_id: ObjectId | None = None, limit: int = 0) -> list[dict[str, Any]]:
    query: dict[str, Any] = {"employee": employee_id} if employee_id is not None else {}
    cursor = db.assessment_results.find(query).sort("submittedAt", DESCENDING)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def latest_results_by_assessment(db, employee_id: ObjectId) -> dict[str, dict[str, Any]]:
    latest: dict[str, dict[str, Any]] = {}
    for doc in list_results(db, employee_id=employee_id):
        key = str(doc.get("assessment") or "")
        # Sorted newest first, so the first hit per assessment is the latest.
        latest.setdefault(key, doc)
    return latest


def count_results(db, assessment_id: ObjectId) -> int:
    return db.assessment_results.count_documents({"assessment": assessment_id})
