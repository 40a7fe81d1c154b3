from __future__ import annotations

import logging
from typing import Any

from bson import ObjectId

from hr2.grading import classify_level, percent_half_up
from hr2.models import CATEGORIES
from hr2.store import competencies as competency_store
from hr2.utils.auth import ROLE_EMPLOYEE
from hr2.utils.datetime import to_iso
from hr2.utils.errors import bad_request
from hr2.utils.validators import parse_int_in_range

logger = logging.getLogger(__name__)

# Rating dimensions of a manual evaluation, each scored 0-100 (0 = not rated).
DIMENSIONS = ("technicalSkills", "communication", "problemSolving", "teamwork", "leadership")


def competency_state(db, employee_id: ObjectId, skill_name: str) -> dict[str, Any]:
    competency = competency_store.get_competency(db, employee_id, skill_name)
    if competency is None:
        return {"employee": str(employee_id), "skillName": skill_name, "assessed": False}
    return competency.to_dict()


def competency_overview(db, employee_id: ObjectId, *, needs_improvement_below: int) -> dict[str, Any]:
    competencies = competency_store.list_competencies(db, employee_id)
    scores = [c.score for c in competencies if c.score is not None]

    return {
        "competencies": [c.to_dict() for c in competencies],
        "stats": {
            "totalSkills": len(competencies),
            "assessedSkills": len(scores),
            # mean of the assessed scores, halves rounded up
            "averageScore": percent_half_up(sum(scores), 100 * len(scores)),
            "needsImprovement": sum(1 for s in scores if s < needs_improvement_below),
            "pendingAssessment": len(competencies) - len(scores),
        },
    }


def parse_dimensions(raw: Any) -> dict[str, int]:
    """Validate a multi-dimension evaluation; unrated dimensions default to 0."""
    if not isinstance(raw, dict):
        raise bad_request("assessment must be an object", details={"field": "assessment"})
    unknown = sorted(k for k in raw if k not in DIMENSIONS and k != "notes")
    if unknown:
        raise bad_request("Unknown dimensions", details={"fields": unknown, "allowed": list(DIMENSIONS)})
    return {
        name: parse_int_in_range(raw[name], field=name, low=0, high=100) if raw.get(name) is not None else 0
        for name in DIMENSIONS
    }


def score_from_dimensions(dimensions: dict[str, int]) -> int:
    # unrated (zero) dimensions are left out of the mean
    rated = [v for v in dimensions.values() if v > 0]
    return percent_half_up(sum(rated), 100 * len(rated))


def record_competency(
    db,
    *,
    employee_id: ObjectId,
    skill_name: str,
    category: str,
    assessed_by: ObjectId,
    notes: str | None,
    score: int | None = None,
    dimensions: dict[str, int] | None = None,
) -> dict[str, Any]:
    if category not in CATEGORIES:
        raise bad_request("Invalid category", details={"field": "category", "allowed": list(CATEGORIES)})
    if dimensions is not None:
        score = score_from_dimensions(dimensions)
    if score is None:
        raise bad_request("score or assessment is required", details={"field": "score"})

    competency = competency_store.upsert_competency(
        db,
        employee_id=employee_id,
        skill_name=skill_name,
        category=category,
        score=score,
        level=classify_level(score),
        assessed_by=assessed_by,
        notes=notes,
        detailed_scores=dimensions,
    )
    logger.info(
        "competency_recorded employee=%s skill=%s score=%s by=%s", employee_id, skill_name, score, assessed_by
    )
    return competency.to_dict()


def competency_roster(db) -> list[dict[str, Any]]:
    """Every employee with a rollup of their current competency records.

    ``competencyScore`` is the half-up mean of the assessed skills (``None``
    when nothing is assessed yet). ``assessmentNotes`` come from the most
    recently assessed record.
    """
    users = list(
        db.users.find({"role": ROLE_EMPLOYEE}, {"passwordHash": 0}).sort([("fullName", 1), ("email", 1)])
    )
    by_employee: dict[str, list] = {}
    for competency in competency_store.list_competencies_for_employees(db, [u["_id"] for u in users]):
        if competency.assessed:
            by_employee.setdefault(competency.employee_id, []).append(competency)

    roster: list[dict[str, Any]] = []
    for user in users:
        assessed = by_employee.get(str(user["_id"]), [])
        latest = max(
            (c for c in assessed if c.assessed_at is not None), key=lambda c: c.assessed_at, default=None
        )
        roster.append(
            {
                "_id": str(user["_id"]),
                "fullName": user.get("fullName") or user.get("email") or "Unknown",
                "email": user.get("email", ""),
                "role": user.get("role", ""),
                "assessedSkills": len(assessed),
                "competencyScore": (
                    percent_half_up(sum(c.score for c in assessed), 100 * len(assessed)) if assessed else None
                ),
                "lastAssessed": to_iso(latest.assessed_at) if latest else None,
                "assessmentNotes": latest.notes if latest else "",
            }
        )
    return roster
