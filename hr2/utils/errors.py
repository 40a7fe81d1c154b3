from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ApiError(Exception):
    code: str
    message: str
    status: int = 400
    details: Any | None = None


def bad_request(message: str, details: Any | None = None) -> ApiError:
    return ApiError("BAD_REQUEST", message, status=400, details=details)


def not_found(message: str) -> ApiError:
    return ApiError("NOT_FOUND", message, status=404)


def assessment_inactive(assessment_id: str) -> ApiError:
    return ApiError(
        "ASSESSMENT_INACTIVE",
        "Assessment is not available",
        status=409,
        details={"assessmentId": assessment_id},
    )


def conflict(message: str) -> ApiError:
    return ApiError("CONFLICT", message, status=409)
