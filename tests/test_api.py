"""
API tests for the practice test and progress endpoints.
"""
import pytest
from fastapi.testclient import TestClient

from certprep.core.dependencies import get_clock, get_db
from certprep.core.security import create_access_token
from certprep.main import app
from tests.factories import correct_option_id, wrong_option_id


@pytest.fixture
def client(db, clock):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def headers_for(user):
    return {"Authorization": f"Bearer {create_access_token(str(user.id))}"}


@pytest.fixture
def auth_headers(learner):
    return headers_for(learner)


@pytest.fixture
def started_test(client, auth_headers, categories, questions):
    response = client.post(
        "/api/v1/tests",
        json={
            "category_ids": [categories["security"].id],
            "question_count": 3,
            "time_limit_minutes": 15,
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()


def answer(client, headers, test_id, question_id, option_id, seconds=20):
    return client.post(
        f"/api/v1/tests/{test_id}/answers",
        json={"question_id": question_id, "selected_option_id": option_id, "time_spent_seconds": seconds},
        headers=headers,
    )


class TestAuthentication:

    def test_requires_token(self, client):
        assert client.get("/api/v1/tests").status_code == 401

    def test_rejects_garbage_token(self, client):
        response = client.get("/api/v1/tests", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestCategories:

    def test_listed_alphabetically(self, client, auth_headers, categories):
        response = client.get("/api/v1/categories", headers=auth_headers)
        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Hardware", "Networking", "Security"]


class TestCreateTest:

    def test_creates_open_test_without_answer_keys(self, started_test, questions):
        assert started_test["status"] == "open"
        assert started_test["total_questions"] == 3
        assert started_test["is_partial"] is False
        assert started_test["passed"] is None
        assert sorted(q["id"] for q in started_test["questions"]) == sorted(q.id for q in questions["security"])
        for question in started_test["questions"]:
            for option in question["options"]:
                assert set(option) == {"id", "option_text"}

    def test_partial_test_is_flagged(self, client, auth_headers, categories, questions):
        response = client.post(
            "/api/v1/tests",
            json={"category_ids": [categories["networking"].id], "question_count": 10, "time_limit_minutes": 15},
            headers=auth_headers,
        )
        assert response.status_code == 201
        body = response.json()
        assert body["is_partial"] is True
        assert body["requested_questions"] == 10
        assert len(body["questions"]) == 4

    def test_invalid_config(self, client, auth_headers, categories, questions):
        response = client.post(
            "/api/v1/tests",
            json={"category_ids": [categories["networking"].id], "question_count": 0, "time_limit_minutes": 15},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_CONFIG"

    def test_empty_pool(self, client, auth_headers, categories, questions):
        response = client.post(
            "/api/v1/tests",
            json={"category_ids": [categories["hardware"].id], "question_count": 5, "time_limit_minutes": 15},
            headers=auth_headers,
        )
        assert response.status_code == 409
        assert response.json()["error_code"] == "EMPTY_POOL"

    def test_question_order_is_stable(self, client, auth_headers, started_test):
        response = client.get(f"/api/v1/tests/{started_test['id']}", headers=auth_headers)
        assert [q["id"] for q in response.json()["questions"]] == [q["id"] for q in started_test["questions"]]


class TestTakingATest:

    def test_full_flow(self, client, auth_headers, started_test, questions):
        by_id = {q.id: q for q in questions["security"]}
        ids = [q["id"] for q in started_test["questions"]]

        first = answer(client, auth_headers, started_test["id"], ids[0], correct_option_id(by_id[ids[0]]))
        assert first.status_code == 200
        assert first.json()["is_correct"] is True
        answer(client, auth_headers, started_test["id"], ids[1], wrong_option_id(by_id[ids[1]]))

        early = client.get(f"/api/v1/tests/{started_test['id']}/results", headers=auth_headers)
        assert early.status_code == 409

        completed = client.post(f"/api/v1/tests/{started_test['id']}/complete", headers=auth_headers)
        assert completed.status_code == 200
        body = completed.json()
        assert body["status"] == "completed"
        assert body["warnings"] == []
        assert body["session"]["is_completed"] is True
        assert body["session"]["score"] == float(by_id[ids[0]].points)
        assert body["session"]["max_score"] == 4.0

        retry = client.post(f"/api/v1/tests/{started_test['id']}/complete", headers=auth_headers)
        assert retry.json()["status"] == "already_completed"
        assert retry.json()["session"]["percentage"] == body["session"]["percentage"]

        results = client.get(f"/api/v1/tests/{started_test['id']}/results", headers=auth_headers).json()
        assert [a["question_id"] for a in results["answers"]] == ids[:2]
        assert results["answers"][1]["correct_option_id"] == correct_option_id(by_id[ids[1]])
        assert results["unanswered_question_ids"] == ids[2:]

        progress = client.get("/api/v1/progress", headers=auth_headers).json()
        assert len(progress) == 1
        assert progress[0]["category"]["name"] == "Security"
        assert progress[0]["questions_attempted"] == 2
        assert progress[0]["questions_correct"] == 1
        assert progress[0]["average_score"] == 50.0

        overview = client.get("/api/v1/progress/overview", headers=auth_headers).json()
        assert overview["total_tests_taken"] == 1
        assert overview["categories_studied"] == 1
        assert overview["best_recent_score"] == body["session"]["percentage"]

    def test_answer_after_completion_conflicts(self, client, auth_headers, started_test):
        question_id = started_test["questions"][0]["id"]
        client.post(f"/api/v1/tests/{started_test['id']}/complete", headers=auth_headers)

        response = answer(client, auth_headers, started_test["id"], question_id, None)
        assert response.status_code == 409
        assert response.json()["error_code"] == "SESSION_COMPLETED"

    def test_question_outside_the_test(self, client, auth_headers, started_test, questions):
        outsider = questions["networking"][0]
        response = answer(client, auth_headers, started_test["id"], outsider.id, correct_option_id(outsider))
        assert response.status_code == 400
        assert response.json()["error_code"] == "UNKNOWN_QUESTION"

    def test_late_answer_is_gone(self, client, auth_headers, started_test, clock):
        clock.advance(minutes=15, seconds=1)
        question_id = started_test["questions"][0]["id"]

        response = answer(client, auth_headers, started_test["id"], question_id, None)
        assert response.status_code == 410
        assert response.json()["error_code"] == "SESSION_EXPIRED"

        detail = client.get(f"/api/v1/tests/{started_test['id']}", headers=auth_headers).json()
        assert detail["is_completed"] is True
        assert detail["completion_reason"] == "expired"

    def test_late_completion_is_gone(self, client, auth_headers, started_test, clock):
        clock.advance(minutes=16)

        response = client.post(f"/api/v1/tests/{started_test['id']}/complete", headers=auth_headers)
        assert response.status_code == 410

        retry = client.post(f"/api/v1/tests/{started_test['id']}/complete", headers=auth_headers)
        assert retry.status_code == 200
        assert retry.json()["status"] == "already_completed"
        assert retry.json()["session"]["completion_reason"] == "expired"

    def test_other_users_test_is_not_found(self, client, admin, started_test):
        response = client.get(f"/api/v1/tests/{started_test['id']}", headers=headers_for(admin))
        assert response.status_code == 404

    def test_missing_test(self, client, auth_headers):
        response = client.post("/api/v1/tests/does-not-exist/complete", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["error_code"] == "SESSION_NOT_FOUND"

    def test_list_tests(self, client, auth_headers, started_test):
        response = client.get("/api/v1/tests", headers=auth_headers)
        assert [t["id"] for t in response.json()] == [started_test["id"]]


class TestReconcile:

    def test_admin_only(self, client, auth_headers):
        assert client.post("/api/v1/progress/reconcile", headers=auth_headers).status_code == 403

    def test_nothing_pending(self, client, admin):
        response = client.post("/api/v1/progress/reconcile", headers=headers_for(admin))
        assert response.status_code == 200
        assert response.json() == {"applied": 0, "skipped": 0, "failed": 0}
