from conftest import create_dream, register


def _add_task(client, dream_id, title, **fields):
    response = client.post(f"/api/dreams/{dream_id}/tasks", json={"title": title, **fields})
    assert response.status_code == 201, response.text
    return response.json()


def test_create_task_defaults(client, no_enrichment):
    register(client)
    dream = create_dream(client)

    task = _add_task(client, dream["id"], "Buy running shoes")

    assert task["dreamId"] == dream["id"]
    assert task["status"] == "To-Do"
    assert task["priority"] == "Medium"
    assert task["completedAt"] is None
    assert task["dueDate"] is None


def test_create_task_validation(client, no_enrichment):
    register(client)
    dream = create_dream(client)

    response = client.post(
        f"/api/dreams/{dream['id']}/tasks",
        json={"title": "Stretch", "status": "Finished", "priority": "Urgent"},
    )

    assert response.status_code == 400
    paths = {error["path"] for error in response.json()["errors"]}
    assert paths == {"status", "priority"}


def test_create_done_task_is_stamped(client, no_enrichment):
    register(client)
    dream = create_dream(client)

    task = _add_task(client, dream["id"], "Sign up for a race", status="Done")

    assert task["completedAt"] is not None


def test_task_order(client, no_enrichment):
    register(client)
    dream = create_dream(client)
    dream_id = dream["id"]

    done_first = _add_task(client, dream_id, "Done first", priority="High", status="Done")
    low = _add_task(client, dream_id, "Low", priority="Low", dueDate="2030-01-01T00:00:00")
    medium_late = _add_task(client, dream_id, "Medium late", priority="Medium", dueDate="2030-06-01T00:00:00")
    high_undated = _add_task(client, dream_id, "High undated", priority="High")
    medium_early = _add_task(client, dream_id, "Medium early", priority="Medium", dueDate="2030-02-01T00:00:00")
    high_dated = _add_task(client, dream_id, "High dated", priority="High", dueDate="2030-12-01T00:00:00")
    done_second = _add_task(client, dream_id, "Done second", priority="Low", status="Done")

    tasks = client.get(f"/api/dreams/{dream_id}/tasks").json()

    assert [task["id"] for task in tasks] == [
        high_dated["id"],
        high_undated["id"],
        medium_early["id"],
        medium_late["id"],
        low["id"],
        done_first["id"],
        done_second["id"],
    ]


def test_marking_done_sets_completed_at(client, no_enrichment):
    register(client)
    dream = create_dream(client)
    task = _add_task(client, dream["id"], "Run 10km", status="Doing")
    other = _add_task(client, dream["id"], "Run 20km", priority="Low")

    response = client.patch(f"/api/tasks/{task['id']}", json={"status": "Done"})

    assert response.status_code == 200
    assert response.json()["completedAt"] is not None

    tasks = client.get(f"/api/dreams/{dream['id']}/tasks").json()
    assert [t["id"] for t in tasks] == [other["id"], task["id"]]


def test_non_done_transitions_leave_completed_at_empty(client, no_enrichment):
    register(client)
    dream = create_dream(client)
    task = _add_task(client, dream["id"], "Run 10km")

    response = client.patch(f"/api/tasks/{task['id']}", json={"status": "Doing"})

    assert response.status_code == 200
    assert response.json()["completedAt"] is None


def test_leaving_done_keeps_completed_at(client, no_enrichment):
    register(client)
    dream = create_dream(client)
    task = _add_task(client, dream["id"], "Run 10km")

    done = client.patch(f"/api/tasks/{task['id']}", json={"status": "Done"}).json()
    reopened = client.patch(f"/api/tasks/{task['id']}", json={"status": "Doing"}).json()
    done_again = client.patch(f"/api/tasks/{task['id']}", json={"status": "Done"}).json()

    assert reopened["status"] == "Doing"
    assert reopened["completedAt"] == done["completedAt"]
    assert done_again["completedAt"] is not None


def test_patch_task_fields(client, no_enrichment):
    register(client)
    dream = create_dream(client)
    task = _add_task(client, dream["id"], "Run 10km")

    response = client.patch(
        f"/api/tasks/{task['id']}",
        json={"title": "Run 15km", "priority": "High", "dueDate": "2030-03-01T00:00:00", "dreamId": 999},
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["title"] == "Run 15km"
    assert updated["priority"] == "High"
    assert updated["dueDate"].startswith("2030-03-01")
    assert updated["dreamId"] == dream["id"]


def test_patch_task_rejects_null_status(client, no_enrichment):
    register(client)
    dream = create_dream(client)
    task = _add_task(client, dream["id"], "Run 10km")

    response = client.patch(f"/api/tasks/{task['id']}", json={"status": None})

    assert response.status_code == 400


def test_other_users_task_is_forbidden(client, no_enrichment):
    register(client, "owner")
    dream = create_dream(client)
    task = _add_task(client, dream["id"], "Run 10km")
    client.post("/api/logout")
    register(client, "intruder")

    assert client.patch(f"/api/tasks/{task['id']}", json={"status": "Done"}).status_code == 403
    assert client.delete(f"/api/tasks/{task['id']}").status_code == 403


def test_missing_task_is_404(client):
    register(client)

    assert client.patch("/api/tasks/999", json={"status": "Done"}).status_code == 404
    assert client.delete("/api/tasks/999").status_code == 404


def test_delete_task(client, no_enrichment):
    register(client)
    dream = create_dream(client)
    task = _add_task(client, dream["id"], "Run 10km")

    assert client.delete(f"/api/tasks/{task['id']}").status_code == 204
    assert client.get(f"/api/dreams/{dream['id']}/tasks").json() == []


def test_status_change_refreshes_dream_insights(client):
    register(client)
    dream = create_dream(client)
    tasks = client.get(f"/api/dreams/{dream['id']}/tasks").json()

    response = client.patch(f"/api/tasks/{tasks[0]['id']}", json={"status": "Done"})
    assert response.status_code == 200

    refreshed = client.get(f"/api/dreams/{dream['id']}").json()
    assert refreshed["aiConfidence"] == 60
    assert refreshed["nextAction"] == "Continue working on your tasks in order of priority"


def test_title_change_does_not_refresh_insights(client):
    register(client)
    dream = create_dream(client)
    tasks = client.get(f"/api/dreams/{dream['id']}/tasks").json()

    client.patch(f"/api/tasks/{tasks[0]['id']}", json={"title": "Draft a training plan"})

    assert client.get(f"/api/dreams/{dream['id']}").json()["aiConfidence"] == 65


def test_due_dates_with_offsets_sort_by_instant(client, no_enrichment):
    register(client)
    dream = create_dream(client)

    tokyo = _add_task(client, dream["id"], "Tokyo deadline", dueDate="2030-01-02T00:00:00+09:00")
    utc = _add_task(client, dream["id"], "UTC deadline", dueDate="2030-01-01T20:00:00Z")

    assert tokyo["dueDate"].startswith("2030-01-01T15:00:00")
    assert tokyo["dueDate"].endswith("Z")
    assert utc["dueDate"].startswith("2030-01-01T20:00:00")

    tasks = client.get(f"/api/dreams/{dream['id']}/tasks").json()
    assert [task["id"] for task in tasks] == [tokyo["id"], utc["id"]]


def test_patched_due_date_is_stored_in_utc(client, no_enrichment):
    register(client)
    dream = create_dream(client)
    task = _add_task(client, dream["id"], "Run 10km")

    response = client.patch(f"/api/tasks/{task['id']}", json={"dueDate": "2030-05-01T08:30:00-04:00"})

    assert response.status_code == 200
    assert response.json()["dueDate"].startswith("2030-05-01T12:30:00")
