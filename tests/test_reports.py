from __future__ import annotations

from datetime import datetime, timezone
from io import BytesIO

from bson import ObjectId
from openpyxl import load_workbook

from helpers import auth_header, bootstrap_admin


def _seed(db) -> None:
    a, b = ObjectId(), ObjectId()
    db.employee_competencies.insert_many(
        [
            {"employee": a, "skillName": "SQL", "category": "Technical Skills", "score": 80, "level": "Advanced"},
            {"employee": b, "skillName": "SQL", "category": "Technical Skills", "score": 95, "level": "Expert"},
            {"employee": a, "skillName": "Teamwork", "category": "Soft Skills", "score": 40, "level": "Beginner"},
            {"employee": b, "skillName": "Teamwork", "category": "Soft Skills", "score": None, "level": None},
        ]
    )
    db.assessment_results.insert_many(
        [
            {
                "employee": a,
                "skillName": "SQL",
                "score": 80,
                "passed": True,
                "submittedAt": datetime(2026, 3, 1, 10, tzinfo=timezone.utc),
            },
            {
                "employee": b,
                "skillName": "SQL",
                "score": 60,
                "passed": False,
                "submittedAt": datetime(2026, 3, 2, 10, tzinfo=timezone.utc),
            },
            {
                "employee": a,
                "skillName": "Teamwork",
                "score": 40,
                "passed": False,
                "submittedAt": datetime(2026, 4, 1, 10, tzinfo=timezone.utc),
            },
        ]
    )


def test_competency_summary(app_client):
    app, client = app_client
    token = bootstrap_admin(client)
    _seed(app.extensions["mongo_db"])

    res = client.get("/api/v1/reports/competency", headers=auth_header(token))
    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["assessed"] == 3
    assert data["employees"] == 2
    assert data["averageScore"] == 72
    assert data["bySkill"][0] == {"skill": "SQL", "category": "Technical Skills", "averageScore": 88, "count": 2}
    levels = {r["level"]: r["count"] for r in data["byLevel"]}
    assert levels == {"Beginner": 1, "Intermediate": 0, "Advanced": 1, "Expert": 1}


def test_results_report_window(app_client):
    app, client = app_client
    token = bootstrap_admin(client)
    _seed(app.extensions["mongo_db"])

    res = client.get("/api/v1/reports/results?from=2026-03-01&to=2026-03-31", headers=auth_header(token))
    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["submissions"] == 2
    assert data["passed"] == 1
    assert data["passRate"] == 50
    assert data["bySkill"] == [
        {"skill": "SQL", "submissions": 2, "passed": 1, "passRate": 50, "averageScore": 70}
    ]

    res = client.get("/api/v1/reports/results?from=2026-03-31&to=2026-03-01", headers=auth_header(token))
    assert res.status_code == 400


def test_export_xlsx(app_client):
    app, client = app_client
    token = bootstrap_admin(client)
    _seed(app.extensions["mongo_db"])

    res = client.get("/api/v1/reports/export.xlsx?type=competency", headers=auth_header(token))
    assert res.status_code == 200
    wb = load_workbook(BytesIO(res.data))
    assert wb.sheetnames == ["Meta", "Skills", "Levels"]
    assert wb["Skills"]["A2"].value == "SQL"

    res = client.get(
        "/api/v1/reports/export.xlsx?type=results&from=2026-03-01&to=2026-04-30", headers=auth_header(token)
    )
    assert res.status_code == 200
    wb = load_workbook(BytesIO(res.data))
    assert wb.sheetnames == ["Meta", "Results"]

    res = client.get("/api/v1/reports/export.xlsx?type=payroll", headers=auth_header(token))
    assert res.status_code == 400
