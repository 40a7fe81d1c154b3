from __future__ import annotations

import logging
import os

from flask import Blueprint, current_app, jsonify, request
from pymongo.errors import DuplicateKeyError

from hr2.utils.auth import (
    ROLE_ADMIN,
    ROLE_EMPLOYEE,
    ROLES,
    create_access_token,
    get_current_user,
    hash_password,
    login_required,
    require_roles,
    verify_password,
)
from hr2.utils.datetime import utc_now
from hr2.utils.errors import ApiError, bad_request, conflict
from hr2.utils.validators import require_json, validate_email, validate_password

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


def _new_user(body: dict, *, default_role: str) -> dict:
    email = validate_email(body.get("email"))
    password = validate_password(body.get("password"), allow_short=False)
    role = str(body.get("role") or "").strip().upper() or default_role
    if role not in ROLES:
        raise bad_request("Invalid role", details={"allowed": sorted(ROLES)})

    now = utc_now()
    return {
        "email": email,
        "passwordHash": hash_password(password),
        "fullName": str(body.get("fullName") or "").strip(),
        "role": role,
        "status": "ACTIVE",
        "createdAt": now,
        "updatedAt": now,
    }


@auth_bp.post("/bootstrap")
def bootstrap():
    bootstrap_token = str(os.getenv("BOOTSTRAP_TOKEN", "") or "").strip()
    if not bootstrap_token:
        raise ApiError("FORBIDDEN", "Bootstrap is disabled", status=403)

    provided = str(request.headers.get("X-Bootstrap-Token") or "").strip()
    if not provided or provided != bootstrap_token:
        raise ApiError("FORBIDDEN", "Invalid bootstrap token", status=403)

    db = current_app.extensions["mongo_db"]
    if db.users.count_documents({}) > 0:
        raise conflict("Bootstrap already completed")

    user = _new_user(require_json(), default_role=ROLE_ADMIN)
    db.users.insert_one(user)
    logger.info("bootstrap admin created email=%s", user["email"])

    return jsonify({"success": True, "data": {"email": user["email"], "role": user["role"]}}), 201


@auth_bp.post("/login")
def login():
    body = require_json()
    email = validate_email(body.get("email"))
    password = validate_password(body.get("password"), allow_short=True)

    db = current_app.extensions["mongo_db"]
    user = db.users.find_one({"email": email})
    if not user or not verify_password(password, str(user.get("passwordHash") or "")):
        raise ApiError("AUTH_INVALID", "Invalid email or password", status=401)

    if str(user.get("status") or "ACTIVE").upper() != "ACTIVE":
        raise ApiError("FORBIDDEN", "User is disabled", status=403)

    token = create_access_token(current_app, user)
    db.users.update_one({"_id": user["_id"]}, {"$set": {"lastLoginAt": utc_now()}})

    cfg = current_app.config["CFG"]
    resp = jsonify(
        {
            "success": True,
            "data": {
                "access_token": token,
                "token_type": "bearer",
                "user": {
                    "id": str(user["_id"]),
                    "email": user["email"],
                    "fullName": user.get("fullName", ""),
                    "role": user.get("role", ""),
                },
            },
        }
    )
    resp.set_cookie(
        cfg.AUTH_COOKIE_NAME,
        token,
        max_age=cfg.JWT_EXP_MINUTES * 60,
        httponly=True,
        secure=cfg.IS_PRODUCTION,
        samesite="Lax",
        path="/",
    )
    return resp


@auth_bp.post("/logout")
def logout():
    resp = jsonify({"success": True, "data": {"message": "Logged out"}})
    resp.delete_cookie(current_app.config["CFG"].AUTH_COOKIE_NAME, path="/")
    return resp


@auth_bp.get("/me")
@login_required
def me():
    return jsonify({"success": True, "data": get_current_user()})


@auth_bp.post("/users")
@require_roles([ROLE_ADMIN])
def create_user():
    user = _new_user(require_json(), default_role=ROLE_EMPLOYEE)
    db = current_app.extensions["mongo_db"]
    try:
        res = db.users.insert_one(user)
    except DuplicateKeyError as e:
        raise conflict("Email already exists") from e

    return (
        jsonify({"success": True, "data": {"id": str(res.inserted_id), "email": user["email"], "role": user["role"]}}),
        201,
    )
