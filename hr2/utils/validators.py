from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from flask import request

from hr2.utils.errors import bad_request

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_json() -> dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise bad_request("JSON body must be an object")
    return body


def validate_email(value: Any) -> str:
    email = str(value or "").strip().lower()
    if not email or not _EMAIL_RE.match(email):
        raise bad_request("Invalid email")
    return email


def validate_password(value: Any, *, allow_short: bool) -> str:
    password = str(value or "")
    if not password:
        raise bad_request("Password required")
    if not allow_short and len(password) < 8:
        raise bad_request("Password must be at least 8 characters")
    return password


def require_str(body: dict[str, Any], field: str) -> str:
    value = body.get(field)
    if not isinstance(value, str) or not value.strip():
        raise bad_request(f"{field} is required", details={"field": field})
    return value.strip()


def parse_object_id(value: Any, *, field: str = "id") -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    raw = str(value or "").strip()
    if not raw:
        raise bad_request(f"{field} is required", details={"field": field})
    try:
        return ObjectId(raw)
    except (InvalidId, TypeError) as e:
        raise bad_request(f"Invalid {field}", details={"field": field}) from e


def parse_int_in_range(value: Any, *, field: str, low: int, high: int | None = None) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise bad_request(f"{field} must be a number", details={"field": field})
    if isinstance(value, float) and not value.is_integer():
        raise bad_request(f"{field} must be a whole number", details={"field": field})
    n = int(value)
    if n < low or (high is not None and n > high):
        bounds = f">= {low}" if high is None else f"between {low} and {high}"
        raise bad_request(f"{field} must be {bounds}", details={"field": field})
    return n


def parse_answers(value: Any) -> dict[str, str]:
    """Validate a submission's ``answers`` object: question id -> selected option."""
    if not isinstance(value, dict):
        raise bad_request("answers must be an object", details={"field": "answers"})
    answers: dict[str, str] = {}
    for key, selected in value.items():
        if selected is None:
            continue
        if not isinstance(selected, str):
            raise bad_request(
                "Each answer must be a string", details={"field": "answers", "questionId": str(key)}
            )
        answers[str(key)] = selected
    return answers


def parse_time_taken(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
        raise bad_request("timeTaken must be a non-negative number of seconds", details={"field": "timeTaken"})
    return int(round(value))


def _parse_yyyy_mm_dd(value: str) -> datetime:
    try:
        dt = datetime.strptime(value, "%Y-%m-%d")
    except ValueError as e:
        raise bad_request("Date must be YYYY-MM-DD") from e
    return dt.replace(tzinfo=timezone.utc)


def parse_date_range(args) -> tuple[datetime, datetime, str, str]:
    from_s = str(args.get("from") or "").strip()
    to_s = str(args.get("to") or "").strip()
    if not from_s or not to_s:
        raise bad_request("from and to are required (YYYY-MM-DD)")

    start_dt = _parse_yyyy_mm_dd(from_s)
    end_dt = _parse_yyyy_mm_dd(to_s) + timedelta(days=1)
    if end_dt <= start_dt:
        raise bad_request("Invalid date range")
    return start_dt, end_dt, from_s, to_s
