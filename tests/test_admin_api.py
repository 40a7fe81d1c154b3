from __future__ import annotations

import copy

from bson import ObjectId

from helpers import PROGRAMMING, auth_header, bootstrap_admin, create_assessment, create_employee


def test_create_assessment_applies_defaults(app_client):
    _app, client = app_client
    admin = bootstrap_admin(client)

    created = create_assessment(
        client,
        admin,
        {
            "skillName": "Negotiation",
            "category": "Leadership",
            "questions": [{"question": "Q", "options": ["a", "b"], "correctAnswer": "b"}],
        },
    )
    assert created["passingScore"] == 70
    assert created["duration"] == 30
    assert created["isActive"] is True
    assert created["questions"][0]["correctAnswer"] == "b"
    assert ObjectId.is_valid(created["questions"][0]["_id"])


def test_create_rejects_invalid_questions(app_client):
    _app, client = app_client
    admin = bootstrap_admin(client)

    broken = []
    not_an_option = copy.deepcopy(PROGRAMMING)
    not_an_option["questions"][0]["correctAnswer"] = "O(n log n)"
    broken.append(not_an_option)

    one_option = copy.deepcopy(PROGRAMMING)
    one_option["questions"][1]["options"] = ["Stack"]
    broken.append(one_option)

    no_questions = copy.deepcopy(PROGRAMMING)
    no_questions["questions"] = []
    broken.append(no_questions)

    bad_category = copy.deepcopy(PROGRAMMING)
    bad_category["category"] = "Cooking"
    broken.append(bad_category)

    bad_passing = copy.deepcopy(PROGRAMMING)
    bad_passing["passingScore"] = 101
    broken.append(bad_passing)

    for body in broken:
        res = client.post("/api/v1/admin/assessments", headers=auth_header(admin), json=body)
        assert res.status_code == 400
        assert res.get_json()["error"]["code"] == "BAD_REQUEST"


def test_duplicate_skill_is_conflict(app_client):
    _app, client = app_client
    admin = bootstrap_admin(client)
    create_assessment(client, admin)

    res = client.post("/api/v1/admin/assessments", headers=auth_header(admin), json=PROGRAMMING)
    assert res.status_code == 409
    assert res.get_json()["error"]["code"] == "CONFLICT"


def test_update_and_delete_assessment(app_client):
    _app, client = app_client
    admin = bootstrap_admin(client)
    created = create_assessment(client, admin)

    res = client.put(
        "/api/v1/admin/assessments",
        headers=auth_header(admin),
        json={"id": created["_id"], "passingScore": 80, "description": "Updated"},
    )
    assert res.status_code == 200
    updated = res.get_json()["data"]
    assert updated["passingScore"] == 80
    assert updated["description"] == "Updated"
    assert len(updated["questions"]) == 5

    res = client.put(
        f"/api/v1/admin/assessments/{created['_id']}", headers=auth_header(admin), json={"owner": "me"}
    )
    assert res.status_code == 400

    res = client.delete(f"/api/v1/admin/assessments?id={created['_id']}", headers=auth_header(admin))
    assert res.status_code == 200

    res = client.delete(f"/api/v1/admin/assessments/{created['_id']}", headers=auth_header(admin))
    assert res.status_code == 404


def test_admin_listing_includes_answer_key_and_submissions(app_client):
    _app, client = app_client
    admin = bootstrap_admin(client)
    _uid, token = create_employee(client, admin)
    created = create_assessment(client, admin)
    client.post(
        "/api/v1/assessments/submit",
        headers=auth_header(token),
        json={"assessmentId": created["_id"], "answers": {}},
    )

    res = client.get("/api/v1/admin/assessments", headers=auth_header(admin))
    assert res.status_code == 200
    items = res.get_json()["data"]["assessments"]
    assert len(items) == 1
    assert items[0]["submissions"] == 1
    assert all("correctAnswer" in q for q in items[0]["questions"])


def test_employee_cannot_use_admin_routes(app_client):
    _app, client = app_client
    admin = bootstrap_admin(client)
    _uid, token = create_employee(client, admin)

    res = client.post("/api/v1/admin/assessments", headers=auth_header(token), json=PROGRAMMING)
    assert res.status_code == 403
    assert res.get_json()["error"]["code"] == "FORBIDDEN"

    res = client.get("/api/v1/reports/competency", headers=auth_header(token))
    assert res.status_code == 403
