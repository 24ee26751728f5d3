import json

from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableLambda

import enrichment
from agents import DreamAdvisorAgent
from conftest import create_dream, register


def _scripted_advisor():
    def answer(prompt):
        text = prompt.to_string()
        if "actionable timeline" in text:
            return AIMessage(content=json.dumps({
                "tasks": [
                    {"title": "Run 5km", "priority": "Medium", "dueDate": "2030-02-01"},
                    {"title": "Buy shoes", "priority": "High"},
                ],
                "nextAction": "Buy shoes this weekend",
                "aiConfidence": 82,
            }))
        if "helpful resources" in text:
            assert "Run 5km" in text
            return AIMessage(content=json.dumps({"resources": [
                {"title": "Marathon guide", "type": "video", "url": "https://example.com/guide", "duration": 12},
            ]}))
        return AIMessage(content=json.dumps({"progressPercentage": 50, "nextAction": "Keep going", "aiConfidence": 77}))

    return DreamAdvisorAgent(llm=RunnableLambda(answer))


def test_new_dream_gets_suggestions(client, monkeypatch):
    monkeypatch.setattr(enrichment, "dream_advisor", _scripted_advisor())
    register(client)

    dream = create_dream(client)
    assert dream["aiConfidence"] == 75

    stored = client.get(f"/api/dreams/{dream['id']}").json()
    assert stored["nextAction"] == "Buy shoes this weekend"
    assert stored["aiConfidence"] == 82

    tasks = client.get(f"/api/dreams/{dream['id']}/tasks").json()
    assert [task["title"] for task in tasks] == ["Buy shoes", "Run 5km"]
    assert tasks[1]["dueDate"].startswith("2030-02-01")

    resources = client.get(f"/api/dreams/{dream['id']}/resources").json()
    assert resources[0]["type"] == "video"
    assert resources[0]["duration"] == 12


def test_progress_written_after_task_create(client, monkeypatch):
    monkeypatch.setattr(enrichment, "dream_advisor", _scripted_advisor())
    register(client)
    dream = create_dream(client)

    client.post(f"/api/dreams/{dream['id']}/tasks", json={"title": "Run 10km"})

    stored = client.get(f"/api/dreams/{dream['id']}").json()
    assert stored["nextAction"] == "Keep going"
    assert stored["aiConfidence"] == 77


def test_enrichment_of_deleted_dream_is_dropped(client, run):
    from storage import storage

    register(client)
    dream = create_dream(client)
    client.delete(f"/api/dreams/{dream['id']}")

    # Must not raise even though the dream is gone
    run(enrichment.enrich_new_dream, dream["id"], dream["title"], None)
    run(enrichment.refresh_dream_progress, dream["id"], dream["title"])

    assert run(storage.get_tasks_by_dream_id, dream["id"]) == []
    assert run(storage.get_resources_by_dream_id, dream["id"]) == []


def test_dream_deleted_while_tasks_are_stored(client, run, monkeypatch, no_enrichment):
    from storage import storage

    monkeypatch.setattr(enrichment, "dream_advisor", _scripted_advisor())
    register(client)
    dream = create_dream(client)

    original_create_task = storage.create_task
    deleted = []

    async def create_then_delete(dream_id, values):
        task = await original_create_task(dream_id, values)
        if not deleted:
            await storage.delete_dream(dream_id)
            deleted.append(dream_id)
        return task

    monkeypatch.setattr(storage, "create_task", create_then_delete)

    run(enrichment.enrich_new_dream, dream["id"], dream["title"], None)

    assert deleted == [dream["id"]]
    assert run(storage.get_tasks_by_dream_id, dream["id"]) == []
    assert run(storage.get_resources_by_dream_id, dream["id"]) == []
