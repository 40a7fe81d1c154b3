from __future__ import annotations

from bson import ObjectId
from flask import Blueprint, current_app, jsonify, request

from hr2.services import assessments as assessment_service
from hr2.services import competencies as competency_service
from hr2.utils.auth import ROLE_ADMIN, get_current_user, require_roles
from hr2.utils.errors import not_found
from hr2.utils.validators import parse_int_in_range, parse_object_id, require_json, require_str

admin_bp = Blueprint("admin", __name__)


def _db():
    return current_app.extensions["mongo_db"]


@admin_bp.get("/assessments")
@require_roles([ROLE_ADMIN])
def list_assessments():
    return jsonify({"success": True, "data": {"assessments": assessment_service.list_all_assessments(_db())}})


@admin_bp.post("/assessments")
@require_roles([ROLE_ADMIN])
def create_assessment():
    assessment = assessment_service.create_assessment(
        _db(),
        require_json(),
        created_by=ObjectId(get_current_user()["id"]),
        cfg=current_app.config["CFG"],
    )
    return jsonify({"success": True, "data": assessment.admin_dict()}), 201


@admin_bp.put("/assessments")
@admin_bp.put("/assessments/<assessment_id>")
@require_roles([ROLE_ADMIN])
def update_assessment(assessment_id: str | None = None):
    body = require_json()
    oid = parse_object_id(assessment_id or body.get("id") or body.get("_id"), field="id")
    assessment = assessment_service.update_assessment(_db(), oid, body)
    return jsonify({"success": True, "data": assessment.admin_dict()})


@admin_bp.delete("/assessments")
@admin_bp.delete("/assessments/<assessment_id>")
@require_roles([ROLE_ADMIN])
def delete_assessment(assessment_id: str | None = None):
    oid = parse_object_id(assessment_id or request.args.get("id"), field="id")
    assessment_service.delete_assessment(_db(), oid)
    return jsonify({"success": True, "data": {"message": "Assessment deleted"}})


@admin_bp.get("/competencies")
@require_roles([ROLE_ADMIN])
def competency_roster():
    return jsonify({"success": True, "data": {"employees": competency_service.competency_roster(_db())}})


@admin_bp.post("/competencies")
@require_roles([ROLE_ADMIN])
def record_competency():
    body = require_json()
    employee_id = parse_object_id(body.get("employeeId"), field="employeeId")
    if _db().users.find_one({"_id": employee_id}, {"_id": 1}) is None:
        raise not_found("Employee not found")

    # Either a direct score or a per-dimension evaluation under "assessment".
    evaluation = body.get("assessment")
    dimensions = competency_service.parse_dimensions(evaluation) if evaluation is not None else None
    score = None
    if dimensions is None:
        score = parse_int_in_range(body.get("score"), field="score", low=0, high=100)

    notes = body.get("notes")
    if notes is None and dimensions is not None:
        notes = evaluation.get("notes")

    data = competency_service.record_competency(
        _db(),
        employee_id=employee_id,
        skill_name=require_str(body, "skillName"),
        category=require_str(body, "category"),
        score=score,
        dimensions=dimensions,
        assessed_by=ObjectId(get_current_user()["id"]),
        notes=str(notes).strip() if notes is not None else None,
    )
    return jsonify({"success": True, "data": data}), 201


@admin_bp.get("/competencies/<employee_id>")
@require_roles([ROLE_ADMIN])
def employee_competencies(employee_id: str):
    oid = parse_object_id(employee_id, field="employeeId")
    cfg = current_app.config["CFG"]
    data = competency_service.competency_overview(_db(), oid, needs_improvement_below=cfg.NEEDS_IMPROVEMENT_BELOW)
    return jsonify({"success": True, "data": data})
