"""
ScoreTrack - HTTP API Tests
"""
import pytest


def _create_math_test(client):
    response = client.post("/api/tests", json={
        "date": "2024-01-01",
        "correct_points": 4,
        "wrong_points": 1,
        "is_negative": True,
        "subjects": [{"name": "Math", "total_q": 10, "attempted_q": 8, "correct_q": 6}],
    })
    assert response.status_code == 201
    return response.json()["id"]


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Request-ID" in response.headers


def test_history_flow(client):
    test_id = _create_math_test(client)

    response = client.post(f"/api/tests/{test_id}/subjects", json={
        "name": "Physics", "total_q": 10, "attempted_q": 0, "correct_q": 0
    })
    assert response.status_code == 201

    history = client.get("/api/tests").json()
    assert len(history) == 1
    record = history[0]
    assert record["id"] == test_id
    assert record["name"] is None
    assert record["marking_display"] == "+4/-1"
    assert record["total_score_pct"] == pytest.approx(27.5)
    assert record["total_accuracy_pct"] == pytest.approx(75.0)
    assert [s["name"] for s in record["subjects"]] == ["Math", "Physics"]
    assert record["subjects"][0]["raw"] == {"total": 10, "attempted": 8, "correct": 6}


def test_update_and_delete_subject(client):
    test_id = _create_math_test(client)
    entry_id = client.get(f"/api/tests/{test_id}").json()["subjects"][0]["id"]

    response = client.put(f"/api/subjects/{entry_id}", json={
        "name": "Math", "total_q": 10, "attempted_q": 10, "correct_q": 5
    })
    assert response.status_code == 200
    # 5*4 - 5*1 = 15 of 40
    assert client.get(f"/api/tests/{test_id}").json()["total_score_pct"] == pytest.approx(37.5)

    assert client.delete(f"/api/subjects/{entry_id}").status_code == 200
    assert client.get(f"/api/tests/{test_id}").json()["subjects"] == []


def test_update_test_config(client):
    test_id = _create_math_test(client)

    response = client.put(f"/api/tests/{test_id}", json={
        "date": "2024-01-01", "name": "Mock", "correct_points": 4, "wrong_points": 1, "is_negative": False
    })
    assert response.status_code == 200

    record = client.get(f"/api/tests/{test_id}").json()
    assert record["marking_display"] == "Flat 4"
    assert record["total_score_pct"] == pytest.approx(60.0)


def test_delete_test(client):
    test_id = _create_math_test(client)
    assert client.delete(f"/api/tests/{test_id}").status_code == 200
    assert client.get("/api/tests").json() == []
    assert client.get(f"/api/tests/{test_id}").status_code == 404


def test_delete_missing_test_succeeds(client):
    response = client.delete("/api/tests/9999")
    assert response.status_code == 200


@pytest.mark.parametrize("method,path,body", [
    ("put", "/api/tests/9999", {"date": "2024-01-01", "correct_points": 1}),
    ("post", "/api/tests/9999/subjects", {"name": "X", "total_q": 1, "attempted_q": 1, "correct_q": 1}),
    ("put", "/api/subjects/9999", {"name": "X", "total_q": 1, "attempted_q": 1, "correct_q": 1}),
    ("delete", "/api/subjects/9999", None),
    ("put", "/api/templates/9999", {"name": "X", "correct_points": 1}),
])
def test_not_found_translates_to_404(client, method, path, body):
    kwargs = {"json": body} if body is not None else {}
    response = getattr(client, method)(path, **kwargs)
    assert response.status_code == 404
    assert "not found" in response.json()["detail"]


def test_negative_counts_rejected(client):
    response = client.post("/api/tests", json={
        "date": "2024-01-01", "correct_points": 4,
        "subjects": [{"name": "Math", "total_q": 10, "attempted_q": -1, "correct_q": 0}],
    })
    assert response.status_code == 422
    assert client.get("/api/tests").json() == []


@pytest.mark.parametrize("count", [4294967296, 2 ** 64])
def test_oversized_counts_rejected(client, count):
    response = client.post("/api/tests", json={
        "date": "2024-01-01", "correct_points": 4,
        "subjects": [{"name": "Math", "total_q": count, "attempted_q": 0, "correct_q": 0}],
    })
    assert response.status_code == 422
    assert client.get("/api/tests").json() == []


def test_max_count_accepted(client):
    response = client.post("/api/tests", json={
        "date": "2024-01-01", "correct_points": 4,
        "subjects": [{"name": "Math", "total_q": 4294967295, "attempted_q": 0, "correct_q": 0}],
    })
    assert response.status_code == 201


def test_oversized_add_subject_rejected(client):
    test_id = _create_math_test(client)
    response = client.post(f"/api/tests/{test_id}/subjects", json={
        "name": "Physics", "total_q": 2 ** 64, "attempted_q": 0, "correct_q": 0
    })
    assert response.status_code == 422
    assert len(client.get(f"/api/tests/{test_id}").json()["subjects"]) == 1


def test_oversized_template_total_rejected(client):
    response = client.post("/api/templates", json={
        "name": "NEET", "correct_points": 4,
        "subjects": [{"name": "Biology", "default_total": 2 ** 64}],
    })
    assert response.status_code == 422
    assert client.get("/api/templates").json() == []


def test_template_crud(client):
    payload = {
        "name": "NEET",
        "correct_points": 4,
        "wrong_points": 1,
        "is_negative": True,
        "subjects": [{"name": "Biology", "default_total": 90}, {"name": "Physics", "default_total": 45}],
    }
    response = client.post("/api/templates", json=payload)
    assert response.status_code == 201
    template_id = response.json()["id"]

    duplicate = client.post("/api/templates", json=payload)
    assert duplicate.status_code == 409
    assert "already exists" in duplicate.json()["detail"]

    templates = client.get("/api/templates").json()
    assert templates[0]["subjects"] == payload["subjects"]

    payload["name"] = "NEET UG"
    assert client.put(f"/api/templates/{template_id}", json=payload).status_code == 200
    assert client.get("/api/templates").json()[0]["name"] == "NEET UG"

    assert client.delete(f"/api/templates/{template_id}").status_code == 200
    assert client.get("/api/templates").json() == []
