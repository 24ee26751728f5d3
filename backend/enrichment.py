"""
Best-effort AI enrichment run after the response has been sent.

Each job runs at most once. Failures are logged and dropped; the AI fields on
a dream are advisory and nothing waits for them.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog

from agents import dream_advisor
from storage import storage

logger = structlog.get_logger(__name__)


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


async def _dream_exists(dream_id: int) -> bool:
    return await storage.get_dream_by_id(dream_id) is not None


def _task_values(suggestion: Dict[str, Any]) -> Dict[str, Any]:
    due_date = suggestion.get("dueDate")
    return {
        "title": suggestion["title"],
        "description": suggestion.get("description"),
        "status": suggestion.get("status") or "To-Do",
        "priority": suggestion.get("priority") or "Medium",
        "due_date": _utc(datetime.fromisoformat(due_date)) if due_date else None,
    }


def _resource_values(suggestion: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "title": suggestion["title"],
        "description": suggestion.get("description"),
        "type": suggestion["type"],
        "url": suggestion["url"],
        "is_verified": bool(suggestion.get("isVerified", False)),
        "is_free": bool(suggestion.get("isFree", True)),
        "read_time": suggestion.get("readTime"),
        "duration": suggestion.get("duration"),
    }


def _task_summary(tasks) -> List[Dict[str, Any]]:
    return [{"title": task.title, "status": task.status, "priority": task.priority} for task in tasks]


async def enrich_new_dream(dream_id: int, title: str, description: Optional[str] = None) -> None:
    """Store a suggested timeline and resource list for a freshly created dream"""
    suggested_tasks: List[Dict[str, Any]] = []
    try:
        timeline = await dream_advisor.generate_timeline(title, description)
        await storage.update_dream(dream_id, {
            "next_action": timeline["nextAction"],
            "ai_confidence": timeline["aiConfidence"],
        })
        suggested_tasks = timeline["tasks"]
        stored = 0
        for suggestion in suggested_tasks:
            if not await _dream_exists(dream_id):
                logger.warning("Dream deleted while tasks were being stored", dream_id=dream_id, stored=stored)
                return
            await storage.create_task(dream_id, _task_values(suggestion))
            stored += 1
        logger.info("Timeline stored", dream_id=dream_id, task_count=stored)
    except Exception as e:
        logger.error("Timeline enrichment failed", dream_id=dream_id, error=str(e))

    try:
        resources = await dream_advisor.generate_resources(
            title,
            [{"title": t["title"], "description": t.get("description")} for t in suggested_tasks] or None,
        )
        if not await _dream_exists(dream_id):
            logger.warning("Dream deleted before resources were stored", dream_id=dream_id)
            return
        for suggestion in resources:
            await storage.create_resource(dream_id, _resource_values(suggestion))
        logger.info("Resources stored", dream_id=dream_id, resource_count=len(resources))
    except Exception as e:
        logger.error("Resource enrichment failed", dream_id=dream_id, error=str(e))


async def refresh_dream_progress(dream_id: int, title: str) -> None:
    """Re-analyze the dream's task list and store the new next action and confidence"""
    try:
        tasks = await storage.get_tasks_by_dream_id(dream_id)
        analysis = await dream_advisor.analyze_dream_progress(title, _task_summary(tasks))
        await storage.update_dream(dream_id, {
            "next_action": analysis["nextAction"],
            "ai_confidence": analysis["aiConfidence"],
        })
        logger.info("Progress refreshed", dream_id=dream_id, progress=analysis["progressPercentage"])
    except Exception as e:
        logger.error("Progress enrichment failed", dream_id=dream_id, error=str(e))
