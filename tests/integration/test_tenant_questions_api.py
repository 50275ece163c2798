from __future__ import annotations

from types import SimpleNamespace


def test_admin_builds_and_assigns_question(client, auth_headers, seeded: SimpleNamespace) -> None:
    admin = auth_headers("admin")

    domain = client.post("/api/admin/domains", json={"name": "SOD", "icon": "people"}, headers=admin)
    assert domain.status_code == 201
    question = client.post(
        "/api/admin/questions",
        json={"title": "Segregate approver/requester roles", "domain_id": domain.json()["id"]},
        headers=admin,
    )
    assert question.status_code == 201

    assigned = client.post(
        "/api/admin/tenant-questions",
        json={"tenant_id": seeded.globex.id, "question_id": question.json()["id"]},
        headers=admin,
    )
    assert assigned.status_code == 201
    assert assigned.json()["status"] == "Unanswered"

    listing = client.get(f"/api/tenant/{seeded.globex.id}/questions", headers=auth_headers("globex_customer"))
    assert listing.status_code == 200
    body = listing.json()
    assert len(body) == 1
    assert body[0]["status"] == "Unanswered"
    assert body[0]["question"]["title"] == "Segregate approver/requester roles"
    assert body[0]["question"]["domain"]["name"] == "SOD"


def test_duplicate_assignment_returns_conflict(client, auth_headers, seeded: SimpleNamespace) -> None:
    payload = {"tenant_id": seeded.acme.id, "question_id": seeded.questions[0].id}

    first = client.post("/api/admin/tenant-questions", json=payload, headers=auth_headers("admin"))
    second = client.post("/api/admin/tenant-questions", json=payload, headers=auth_headers("admin"))

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["code"] == "duplicate_assignment"


def test_assignment_is_admin_only(client, auth_headers, seeded: SimpleNamespace) -> None:
    payload = {"tenant_id": seeded.acme.id, "question_id": seeded.questions[0].id}

    response = client.post("/api/admin/tenant-questions", json=payload, headers=auth_headers("consultant"))

    assert response.status_code == 403


def test_tenant_listing_is_tenant_scoped_and_idempotent(client, auth_headers, seeded: SimpleNamespace) -> None:
    client.post(
        "/api/admin/tenant-questions/bulk",
        json={"tenant_id": seeded.acme.id, "question_ids": [question.id for question in seeded.questions]},
        headers=auth_headers("admin"),
    )
    url = f"/api/tenant/{seeded.acme.id}/questions"

    forbidden = client.get(url, headers=auth_headers("globex_customer"))
    first = client.get(url, headers=auth_headers("acme_customer"))
    second = client.get(url, headers=auth_headers("acme_customer"))
    consultant = client.get(url, headers=auth_headers("consultant"))

    assert forbidden.status_code == 403
    assert forbidden.json()["code"] == "forbidden"
    assert first.status_code == 200
    assert first.json() == second.json() == consultant.json()
    assert [item["question_id"] for item in first.json()] == [question.id for question in seeded.questions]


def test_bulk_assignment_reports_skipped(client, auth_headers, seeded: SimpleNamespace) -> None:
    first, second = seeded.questions
    admin = auth_headers("admin")
    client.post(
        "/api/admin/tenant-questions", json={"tenant_id": seeded.acme.id, "question_id": first.id}, headers=admin
    )

    response = client.post(
        "/api/admin/tenant-questions/bulk",
        json={"tenant_id": seeded.acme.id, "question_ids": [first.id, second.id]},
        headers=admin,
    )

    assert response.status_code == 201
    body = response.json()
    assert [item["question_id"] for item in body["created"]] == [second.id]
    assert body["skipped_question_ids"] == [first.id]


def test_status_update_sorts_and_notifies(client, auth_headers, seeded: SimpleNamespace, notifier) -> None:
    batch = client.post(
        "/api/admin/tenant-questions/bulk",
        json={"tenant_id": seeded.acme.id, "question_ids": [question.id for question in seeded.questions]},
        headers=auth_headers("admin"),
    ).json()
    first_id = batch["created"][0]["id"]
    second_id = batch["created"][1]["id"]

    response = client.put(
        f"/api/tenant/{seeded.acme.id}/questions/{first_id}/status",
        json={"status": "Answered"},
        headers=auth_headers("acme_customer"),
    )

    assert response.status_code == 200
    assert response.json()["status"] == "Answered"
    assert [item.recipient for item in notifier.sent] == [seeded.acme_colleague.email]
    assert notifier.sent[0].question_title == seeded.questions[0].title

    ordered = client.get(
        f"/api/tenant/{seeded.acme.id}/questions?sort=status", headers=auth_headers("acme_customer")
    ).json()
    assert [item["id"] for item in ordered] == [second_id, first_id]


def test_status_update_validates_input_and_tenant(client, auth_headers, seeded: SimpleNamespace) -> None:
    created = client.post(
        "/api/admin/tenant-questions",
        json={"tenant_id": seeded.acme.id, "question_id": seeded.questions[0].id},
        headers=auth_headers("admin"),
    ).json()

    invalid = client.put(
        f"/api/tenant/{seeded.acme.id}/questions/{created['id']}/status",
        json={"status": "Finished"},
        headers=auth_headers("acme_customer"),
    )
    wrong_tenant = client.put(
        f"/api/tenant/{seeded.globex.id}/questions/{created['id']}/status",
        json={"status": "Answered"},
        headers=auth_headers("admin"),
    )
    foreign = client.put(
        f"/api/tenant/{seeded.acme.id}/questions/{created['id']}/status",
        json={"status": "Answered"},
        headers=auth_headers("globex_customer"),
    )

    assert invalid.status_code == 400
    assert invalid.json() == {"detail": "Invalid status", "code": "validation_error"}
    assert wrong_tenant.status_code == 404
    assert foreign.status_code == 403


def test_unassign_removes_thread_files(client, auth_headers, seeded: SimpleNamespace, file_storage) -> None:
    created = client.post(
        "/api/admin/tenant-questions",
        json={"tenant_id": seeded.acme.id, "question_id": seeded.questions[0].id},
        headers=auth_headers("admin"),
    ).json()
    customer = auth_headers("acme_customer")
    response = client.post(
        f"/api/tenant-questions/{created['id']}/responses", json={"content": "evidence"}, headers=customer
    ).json()
    client.post(
        f"/api/responses/{response['id']}/attachments",
        files={"file": ("policy.pdf", b"%PDF-1.7", "application/pdf")},
        headers=customer,
    )
    assert len(file_storage.files) == 1

    removed = client.delete(f"/api/admin/tenant-questions/{created['id']}", headers=auth_headers("admin"))

    assert removed.status_code == 204
    assert file_storage.files == {}
    assert client.get(f"/api/tenant-questions/{created['id']}/responses", headers=customer).status_code == 404


def test_malformed_assignment_payload_is_a_validation_error(client, auth_headers, seeded: SimpleNamespace) -> None:
    mistyped = client.post(
        "/api/admin/tenant-questions",
        json={"tenant_id": "x", "question_id": seeded.questions[0].id},
        headers=auth_headers("admin"),
    )
    missing = client.post(
        "/api/admin/tenant-questions", json={"tenant_id": seeded.acme.id}, headers=auth_headers("admin")
    )

    assert mistyped.status_code == 400
    assert mistyped.json()["code"] == "validation_error"
    assert mistyped.json()["detail"].startswith("tenant_id: ")
    assert missing.status_code == 400
    assert missing.json() == {"detail": "question_id: Field required", "code": "validation_error"}
    listing = client.get(f"/api/tenant/{seeded.acme.id}/questions", headers=auth_headers("admin"))
    assert listing.json() == []
