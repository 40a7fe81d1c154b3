from __future__ import annotations

from bson import ObjectId
from flask import Blueprint, current_app, jsonify

from hr2.services import competencies as competency_service
from hr2.utils.auth import get_current_user, login_required

competencies_bp = Blueprint("competencies", __name__)


@competencies_bp.get("")
@login_required
def my_competencies():
    cfg = current_app.config["CFG"]
    data = competency_service.competency_overview(
        current_app.extensions["mongo_db"],
        ObjectId(get_current_user()["id"]),
        needs_improvement_below=cfg.NEEDS_IMPROVEMENT_BELOW,
    )
    return jsonify({"success": True, "data": data})


@competencies_bp.get("/<path:skill_name>")
@login_required
def my_competency(skill_name: str):
    data = competency_service.competency_state(
        current_app.extensions["mongo_db"], ObjectId(get_current_user()["id"]), skill_name.strip()
    )
    return jsonify({"success": True, "data": data})
