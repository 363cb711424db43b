"""Application, task and dashboard routes — HTTP mapping over the record store."""


async def _create_application(client, headers, **fields):
    payload = {"company": "Acme", "position": "Engineer", **fields}
    response = await client.post("/api/v1/applications", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_and_fetch_application(client, alice_headers):
    created = await _create_application(client, alice_headers)
    assert created["status"] == "applied"

    fetched = await client.get(
        f"/api/v1/applications/{created['id']}", headers=alice_headers,
    )
    assert fetched.status_code == 200
    assert fetched.json() == created


async def test_blank_company_is_400(client, alice_headers):
    response = await client.post(
        "/api/v1/applications",
        json={"company": " ", "position": "Engineer"},
        headers=alice_headers,
    )
    assert response.status_code == 400
    detail = response.json()["error"]["details"][0]
    assert detail["field"] == "body.company"
    assert detail["message"] == "Company name is required"

    listed = await client.get("/api/v1/applications", headers=alice_headers)
    assert listed.json() == []


async def test_other_users_application_is_404(client, alice_headers, bob_headers):
    created = await _create_application(client, alice_headers)
    url = f"/api/v1/applications/{created['id']}"

    assert (await client.get(url, headers=bob_headers)).status_code == 404
    patched = await client.patch(url, json={"status": "offer"}, headers=bob_headers)
    assert patched.status_code == 404
    assert (await client.delete(url, headers=bob_headers)).status_code == 404
    assert (await client.get(url, headers=alice_headers)).json()["status"] == "applied"


async def test_malformed_id_is_400(client, alice_headers):
    response = await client.get("/api/v1/applications/not-a-uuid", headers=alice_headers)
    assert response.status_code == 400


async def test_patch_with_unknown_status_is_400(client, alice_headers):
    created = await _create_application(client, alice_headers)
    response = await client.patch(
        f"/api/v1/applications/{created['id']}",
        json={"status": "nonexistent"},
        headers=alice_headers,
    )
    assert response.status_code == 400
    fetched = await client.get(
        f"/api/v1/applications/{created['id']}", headers=alice_headers,
    )
    assert fetched.json() == created


async def test_task_lifecycle(client, alice_headers):
    application = await _create_application(client, alice_headers)
    created = await client.post(
        "/api/v1/tasks",
        json={
            "application_id": application["id"],
            "title": "Send thank-you note",
            "due_date": "2026-03-01",
        },
        headers=alice_headers,
    )
    assert created.status_code == 201
    task = created.json()
    assert task["completed"] is False

    toggled = await client.post(f"/api/v1/tasks/{task['id']}/toggle", headers=alice_headers)
    assert toggled.json()["completed"] is True

    listed = await client.get("/api/v1/tasks", headers=alice_headers)
    assert [t["application_company"] for t in listed.json()] == ["Acme"]

    nested = await client.get(
        f"/api/v1/applications/{application['id']}/tasks", headers=alice_headers,
    )
    assert [t["id"] for t in nested.json()] == [task["id"]]

    deleted = await client.delete(f"/api/v1/tasks/{task['id']}", headers=alice_headers)
    assert deleted.status_code == 204
    missing = await client.get(f"/api/v1/tasks/{task['id']}", headers=alice_headers)
    assert missing.status_code == 404


async def test_task_under_other_users_application_is_404(client, alice_headers, bob_headers):
    application = await _create_application(client, alice_headers)
    response = await client.post(
        "/api/v1/tasks",
        json={"application_id": application["id"], "title": "Sneaky"},
        headers=bob_headers,
    )
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Application not found"


async def test_delete_application_cascades(client, alice_headers):
    application = await _create_application(client, alice_headers)
    await client.post(
        "/api/v1/tasks",
        json={"application_id": application["id"], "title": "Follow up"},
        headers=alice_headers,
    )
    response = await client.delete(
        f"/api/v1/applications/{application['id']}", headers=alice_headers,
    )
    assert response.status_code == 204
    assert (await client.get("/api/v1/tasks", headers=alice_headers)).json() == []


async def test_dashboard_stats(client, alice_headers, bob_headers):
    application = await _create_application(client, alice_headers, status="interview")
    await _create_application(client, bob_headers)
    await client.post(
        "/api/v1/tasks",
        json={"application_id": application["id"], "title": "Prepare"},
        headers=alice_headers,
    )
    response = await client.get("/api/v1/dashboard/stats", headers=alice_headers)
    assert response.json() == {
        "total_applications": 1,
        "total_tasks": 1,
        "pending_tasks": 1,
        "interview_stage": 1,
    }
