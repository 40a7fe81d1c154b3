from __future__ import annotations

from bson import ObjectId
from flask import Blueprint, current_app, jsonify

from hr2.services import assessments as assessment_service
from hr2.utils.auth import get_current_user, login_required
from hr2.utils.validators import parse_answers, parse_object_id, parse_time_taken, require_json

assessments_bp = Blueprint("assessments", __name__)


def _db():
    return current_app.extensions["mongo_db"]


def _caller_id() -> ObjectId:
    return ObjectId(get_current_user()["id"])


@assessments_bp.get("")
@login_required
def list_available():
    items = assessment_service.list_available_assessments(_db(), _caller_id())
    return jsonify({"success": True, "data": {"assessments": items}})


@assessments_bp.get("/results")
@login_required
def my_results():
    results = assessment_service.list_employee_results(_db(), _caller_id())
    return jsonify({"success": True, "data": {"results": results}})


@assessments_bp.get("/<assessment_id>")
@login_required
def get_assessment(assessment_id: str):
    oid = parse_object_id(assessment_id, field="assessmentId")
    assessment = assessment_service.get_public_assessment(_db(), oid)
    return jsonify({"success": True, "data": {"assessment": assessment}})


@assessments_bp.post("/submit")
@login_required
def submit():
    body = require_json()
    assessment_id = parse_object_id(body.get("assessmentId"), field="assessmentId")
    answers = parse_answers(body.get("answers"))
    time_taken = parse_time_taken(body.get("timeTaken", body.get("timeTakenSeconds")))

    out = assessment_service.submit_assessment(
        _db(),
        employee_id=_caller_id(),
        assessment_id=assessment_id,
        answers=answers,
        time_taken=time_taken,
    )
    return jsonify({"success": True, "data": out}), 201
