from __future__ import annotations

from datetime import datetime
from typing import Any

from hr2.grading import percent_half_up
from hr2.models import LEVELS

_ASSESSED = {"score": {"$ne": None}}


def _mean(total: int, count: int) -> int:
    return percent_half_up(total, 100 * count)


def competency_summary(db) -> dict[str, Any]:
    skill_pipe = [
        {"$match": _ASSESSED},
        {
            "$group": {
                "_id": "$skillName",
                "category": {"$first": "$category"},
                "total": {"$sum": "$score"},
                "count": {"$sum": 1},
            }
        },
        {"$project": {"_id": 0, "skill": "$_id", "category": 1, "total": 1, "count": 1}},
    ]
    skill_rows = list(db.employee_competencies.aggregate(skill_pipe))
    by_skill = sorted(
        (
            {
                "skill": r["skill"],
                "category": r.get("category"),
                "averageScore": _mean(int(r["total"]), int(r["count"])),
                "count": int(r["count"]),
            }
            for r in skill_rows
        ),
        key=lambda r: (-r["averageScore"], r["skill"]),
    )

    level_pipe = [
        {"$match": _ASSESSED},
        {"$group": {"_id": "$level", "count": {"$sum": 1}}},
        {"$project": {"_id": 0, "level": "$_id", "count": 1}},
    ]
    level_counts = {str(r["level"]): int(r["count"]) for r in db.employee_competencies.aggregate(level_pipe)}

    category_pipe = [
        {"$match": _ASSESSED},
        {"$group": {"_id": "$category", "count": {"$sum": 1}}},
        {"$project": {"_id": 0, "category": "$_id", "count": 1}},
        {"$sort": {"category": 1}},
    ]
    by_category = list(db.employee_competencies.aggregate(category_pipe))

    total = sum(int(r["total"]) for r in skill_rows)
    count = sum(int(r["count"]) for r in skill_rows)
    return {
        "assessed": count,
        "employees": len(db.employee_competencies.distinct("employee", _ASSESSED)),
        "averageScore": _mean(total, count),
        "bySkill": by_skill,
        "byLevel": [{"level": lvl, "count": level_counts.get(lvl, 0)} for lvl in LEVELS],
        "byCategory": by_category,
    }


def results_report(db, start_dt: datetime, end_dt: datetime) -> dict[str, Any]:
    pipe = [
        {"$match": {"submittedAt": {"$gte": start_dt, "$lt": end_dt}}},
        {
            "$group": {
                "_id": "$skillName",
                "submissions": {"$sum": 1},
                "passed": {"$sum": {"$cond": ["$passed", 1, 0]}},
                "total": {"$sum": "$score"},
            }
        },
        {"$project": {"_id": 0, "skill": "$_id", "submissions": 1, "passed": 1, "total": 1}},
        {"$sort": {"skill": 1}},
    ]
    rows = list(db.assessment_results.aggregate(pipe))

    items = [
        {
            "skill": r["skill"],
            "submissions": int(r["submissions"]),
            "passed": int(r["passed"]),
            "passRate": percent_half_up(int(r["passed"]), int(r["submissions"])),
            "averageScore": _mean(int(r["total"]), int(r["submissions"])),
        }
        for r in rows
    ]
    submissions = sum(r["submissions"] for r in items)
    passed = sum(r["passed"] for r in items)
    return {
        "submissions": submissions,
        "passed": passed,
        "passRate": percent_half_up(passed, submissions),
        "bySkill": items,
    }
