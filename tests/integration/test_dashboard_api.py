from __future__ import annotations

from types import SimpleNamespace


def test_dashboard_combines_progress_and_activity(client, auth_headers, seeded: SimpleNamespace) -> None:
    admin = auth_headers("admin")
    batch = client.post(
        "/api/admin/tenant-questions/bulk",
        json={"tenant_id": seeded.acme.id, "question_ids": [question.id for question in seeded.questions]},
        headers=admin,
    ).json()
    first_id = batch["created"][0]["id"]
    client.put(
        f"/api/tenant/{seeded.acme.id}/questions/{first_id}/status",
        json={"status": "Answered"},
        headers=auth_headers("acme_customer"),
    )
    client.post(
        f"/api/tenant-questions/{first_id}/responses",
        json={"content": "Reviewed every quarter."},
        headers=auth_headers("acme_customer"),
    )

    response = client.get(f"/api/tenant/{seeded.acme.id}/dashboard", headers=auth_headers("acme_colleague"))

    assert response.status_code == 200
    body = response.json()
    assert body["progress"]["overall_completion"] == 50
    assert body["progress"]["total_questions"] == 2
    assert body["progress"]["domain_progress"] == [
        {
            "domain_id": seeded.domain.id,
            "domain": "Access Reviews",
            "icon": "security",
            "answered": 1,
            "total": 2,
            "progress": 50,
        }
    ]
    activity = body["recent_activities"]
    assert len(activity) == 1
    assert activity[0]["type"] == "response"
    assert activity[0]["question_title"] == seeded.questions[0].title
    assert activity[0]["tenant_question_id"] == first_id
    assert activity[0]["user"]["full_name"] == seeded.acme_customer.full_name


def test_empty_dashboard(client, auth_headers, seeded: SimpleNamespace) -> None:
    body = client.get(f"/api/tenant/{seeded.globex.id}/dashboard", headers=auth_headers("globex_customer")).json()

    assert body["progress"] == {
        "overall_completion": 0,
        "answered": 0,
        "total_questions": 0,
        "domain_progress": [],
    }
    assert body["recent_activities"] == []


def test_dashboard_is_tenant_scoped(client, auth_headers, seeded: SimpleNamespace) -> None:
    response = client.get(f"/api/tenant/{seeded.globex.id}/dashboard", headers=auth_headers("acme_customer"))

    assert response.status_code == 403


def test_health_endpoints(client) -> None:
    assert client.get("/api/healthz").json()["status"] == "ok"
    assert client.get("/api/readyz").json()["status"] == "ready"
