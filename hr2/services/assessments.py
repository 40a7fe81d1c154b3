from __future__ import annotations

import logging
from typing import Any

from bson import ObjectId

from hr2.grading import grade_submission
from hr2.models import CATEGORIES, Assessment
from hr2.store import assessments as assessment_store
from hr2.store import competencies as competency_store
from hr2.store import results as result_store
from hr2.utils.datetime import to_iso
from hr2.utils.errors import assessment_inactive, bad_request, not_found
from hr2.utils.validators import parse_int_in_range, require_str

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("skillName", "category", "description", "questions", "passingScore", "duration", "isActive")


def load_assessment(db, assessment_id: ObjectId, *, require_active: bool) -> Assessment:
    assessment = assessment_store.get_assessment(db, assessment_id)
    if assessment is None:
        raise not_found("Assessment not found")
    if require_active and not assessment.is_active:
        raise assessment_inactive(assessment.id)
    return assessment


def get_public_assessment(db, assessment_id: ObjectId) -> dict[str, Any]:
    return load_assessment(db, assessment_id, require_active=True).public_view().to_dict()


def list_available_assessments(db, employee_id: ObjectId) -> list[dict[str, Any]]:
    latest = result_store.latest_results_by_assessment(db, employee_id)
    out: list[dict[str, Any]] = []
    for assessment in assessment_store.list_assessments(db, active_only=True):
        item = assessment.public_view().to_dict()
        last = latest.get(assessment.id)
        item.update(
            {
                "completed": last is not None,
                "lastScore": last.get("score") if last else None,
                "lastAttempt": to_iso(last.get("submittedAt")) if last else None,
                "passed": last.get("passed") if last else None,
            }
        )
        out.append(item)
    return out


def submit_assessment(
    db,
    *,
    employee_id: ObjectId,
    assessment_id: ObjectId,
    answers: dict[str, str],
    time_taken: int | None,
) -> dict[str, Any]:
    assessment = load_assessment(db, assessment_id, require_active=True)
    view = assessment.grading_view()
    grade = grade_submission(view, answers)

    result_doc = result_store.insert_result(
        db, employee_id=employee_id, assessment=view, grade=grade, time_taken=time_taken
    )
    competency_store.upsert_competency(
        db,
        employee_id=employee_id,
        skill_name=view.skill_name,
        category=view.category,
        score=grade.score,
        level=grade.level,
        assessed_at=result_doc["submittedAt"],
    )

    logger.info(
        "assessment_submitted employee=%s assessment=%s score=%s passed=%s level=%s",
        employee_id,
        assessment.id,
        grade.score,
        grade.passed,
        grade.level,
    )
    return {
        "resultId": str(result_doc["_id"]),
        "result": grade.summary(),
        "answers": [row.to_dict() for row in grade.breakdown],
    }


def serialize_result(doc: dict[str, Any]) -> dict[str, Any]:
    return {
        "_id": str(doc["_id"]),
        "assessment": str(doc.get("assessment") or ""),
        "employee": str(doc.get("employee") or ""),
        "skillName": doc.get("skillName"),
        "category": doc.get("category"),
        "score": doc.get("score"),
        "totalQuestions": doc.get("totalQuestions"),
        "correctAnswers": doc.get("correctAnswers"),
        "passed": doc.get("passed"),
        "level": doc.get("level"),
        "timeTaken": doc.get("timeTaken"),
        "submittedAt": to_iso(doc.get("submittedAt")),
        "answers": [{**a, "questionId": str(a.get("questionId") or "")} for a in (doc.get("answers") or [])],
    }


def list_employee_results(db, employee_id: ObjectId) -> list[dict[str, Any]]:
    return [serialize_result(doc) for doc in result_store.list_results(db, employee_id=employee_id)]


# --- administration -------------------------------------------------------


def _clean_questions(raw: Any) -> list[dict[str, Any]]:
    if not isinstance(raw, list) or not raw:
        raise bad_request("questions must be a non-empty list", details={"field": "questions"})

    questions: list[dict[str, Any]] = []
    for idx, q in enumerate(raw):
        if not isinstance(q, dict):
            raise bad_request("Invalid question format", details={"index": idx})
        text = str(q.get("question") or "").strip()
        options = q.get("options")
        correct = q.get("correctAnswer")
        if (
            not text
            or not isinstance(options, list)
            or len(options) < 2
            or not all(isinstance(o, str) and o.strip() for o in options)
            or not isinstance(correct, str)
            or not correct
        ):
            raise bad_request("Invalid question format", details={"index": idx})
        if correct not in options:
            raise bad_request("Correct answer must be one of the options", details={"index": idx})

        qid = q.get("_id")
        questions.append(
            {
                "_id": ObjectId(qid) if qid and ObjectId.is_valid(str(qid)) else ObjectId(),
                "question": text,
                "options": list(options),
                "correctAnswer": correct,
            }
        )
    return questions


def _clean_category(value: Any) -> str:
    category = str(value or "").strip()
    if category not in CATEGORIES:
        raise bad_request("Invalid category", details={"field": "category", "allowed": list(CATEGORIES)})
    return category


def _clean_fields(body: dict[str, Any], *, partial: bool) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    if not partial or "skillName" in body:
        fields["skillName"] = require_str(body, "skillName")
    if not partial or "category" in body:
        fields["category"] = _clean_category(body.get("category"))
    if not partial or "questions" in body:
        fields["questions"] = _clean_questions(body.get("questions"))
    if "description" in body:
        fields["description"] = str(body.get("description") or "").strip()
    if body.get("passingScore") is not None:
        fields["passingScore"] = parse_int_in_range(body["passingScore"], field="passingScore", low=0, high=100)
    if body.get("duration") is not None:
        fields["duration"] = parse_int_in_range(body["duration"], field="duration", low=1)
    if "isActive" in body:
        if not isinstance(body["isActive"], bool):
            raise bad_request("isActive must be a boolean", details={"field": "isActive"})
        fields["isActive"] = body["isActive"]
    return fields


def create_assessment(db, body: dict[str, Any], *, created_by: ObjectId, cfg) -> Assessment:
    fields = _clean_fields(body, partial=False)
    fields.setdefault("description", "")
    fields.setdefault("passingScore", cfg.DEFAULT_PASSING_SCORE)
    fields.setdefault("duration", cfg.DEFAULT_DURATION_MINUTES)
    fields["isActive"] = True
    fields["createdBy"] = created_by

    assessment = assessment_store.insert_assessment(db, fields)
    logger.info("assessment_created id=%s skill=%s questions=%d", assessment.id, assessment.skill_name, len(assessment.questions))
    return assessment


def update_assessment(db, assessment_id: ObjectId, body: dict[str, Any]) -> Assessment:
    unknown = sorted(k for k in body if k not in _EDITABLE_FIELDS and k not in {"id", "_id"})
    if unknown:
        raise bad_request("Unknown fields", details={"fields": unknown})

    fields = _clean_fields(body, partial=True)
    if not fields:
        raise bad_request("Nothing to update")

    if "questions" in fields and result_store.count_results(db, assessment_id):
        logger.warning("assessment_questions_replaced id=%s with existing results", assessment_id)

    assessment = assessment_store.update_assessment(db, assessment_id, fields)
    if assessment is None:
        raise not_found("Assessment not found")
    logger.info("assessment_updated id=%s fields=%s", assessment.id, ",".join(sorted(fields)))
    return assessment


def delete_assessment(db, assessment_id: ObjectId) -> None:
    if not assessment_store.delete_assessment(db, assessment_id):
        raise not_found("Assessment not found")
    logger.info("assessment_deleted id=%s", assessment_id)


def list_all_assessments(db) -> list[dict[str, Any]]:
    out = []
    for assessment in assessment_store.list_assessments(db, active_only=False):
        item = assessment.admin_dict()
        item["submissions"] = result_store.count_results(db, ObjectId(assessment.id))
        out.append(item)
    return out
