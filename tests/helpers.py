from __future__ import annotations


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def bootstrap_admin(client, *, email: str = "admin@example.com", password: str = "password123") -> str:
    res = client.post(
        "/api/v1/auth/bootstrap",
        headers={"X-Bootstrap-Token": "test-bootstrap"},
        json={"email": email, "password": password, "role": "ADMIN", "fullName": "HR Admin"},
    )
    assert res.status_code == 201
    return login(client, email, password)


def login(client, email: str, password: str) -> str:
    res = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200
    return res.get_json()["data"]["access_token"]


def create_employee(client, admin_token: str, *, email: str = "emp@example.com", password: str = "password123"):
    res = client.post(
        "/api/v1/auth/users",
        headers=auth_header(admin_token),
        json={"email": email, "password": password, "role": "EMPLOYEE", "fullName": "Test Employee"},
    )
    assert res.status_code == 201
    user_id = res.get_json()["data"]["id"]
    return user_id, login(client, email, password)


PROGRAMMING = {
    "skillName": "Programming",
    "category": "Technical Skills",
    "description": "Programming fundamentals",
    "passingScore": 70,
    "duration": 30,
    "questions": [
        {
            "question": "What is the time complexity of binary search?",
            "options": ["O(n)", "O(log n)", "O(n^2)", "O(1)"],
            "correctAnswer": "O(log n)",
        },
        {
            "question": "Which data structure uses LIFO?",
            "options": ["Queue", "Stack", "Array", "Linked List"],
            "correctAnswer": "Stack",
        },
        {
            "question": "What does OOP stand for?",
            "options": ["Object Oriented Programming", "Open Online Platform"],
            "correctAnswer": "Object Oriented Programming",
        },
        {
            "question": "Which keyword inherits a class in JavaScript?",
            "options": ["inherit", "extends", "implements", "super"],
            "correctAnswer": "extends",
        },
        {
            "question": "Which HTTP method is idempotent?",
            "options": ["POST", "PUT", "PATCH"],
            "correctAnswer": "PUT",
        },
    ],
}


def create_assessment(client, admin_token: str, payload: dict | None = None) -> dict:
    res = client.post("/api/v1/admin/assessments", headers=auth_header(admin_token), json=payload or PROGRAMMING)
    assert res.status_code == 201, res.get_json()
    return res.get_json()["data"]
