from datetime import datetime, timezone
from typing import List, Tuple
from fastapi import APIRouter, BackgroundTasks, Depends, Response
import logging

from enrichment import refresh_dream_progress
from models import Dream, Task
from schemas import TaskCreate, TaskResponse, TaskUpdate
from security import get_owned_dream, get_owned_task
from storage import storage

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/dreams/{dream_id}/tasks", response_model=List[TaskResponse])
async def get_dream_tasks(dream: Dream = Depends(get_owned_dream)):
    return await storage.get_tasks_by_dream_id(dream.id)


@router.post("/dreams/{dream_id}/tasks", response_model=TaskResponse, status_code=201)
async def create_task(
    payload: TaskCreate,
    background_tasks: BackgroundTasks,
    dream: Dream = Depends(get_owned_dream),
):
    values = payload.model_dump()
    if values["status"] == "Done":
        values["completed_at"] = datetime.now(timezone.utc)

    task = await storage.create_task(dream.id, values)
    background_tasks.add_task(refresh_dream_progress, dream.id, dream.title)
    return task


@router.patch("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    payload: TaskUpdate,
    background_tasks: BackgroundTasks,
    owned: Tuple[Task, Dream] = Depends(get_owned_task),
):
    task, dream = owned
    updates = payload.model_dump(exclude_unset=True)

    # completed_at is stamped on entry into Done and never cleared
    if updates.get("status") == "Done" and task.status != "Done":
        updates["completed_at"] = datetime.now(timezone.utc)

    status_changed = "status" in updates and updates["status"] != task.status
    updated = await storage.update_task(task.id, updates)

    if status_changed:
        logger.info(f"Task {task.id} moved {task.status} -> {updated.status}")
        background_tasks.add_task(refresh_dream_progress, dream.id, dream.title)
    return updated


@router.delete("/tasks/{task_id}", status_code=204)
async def delete_task(owned: Tuple[Task, Dream] = Depends(get_owned_task)):
    task, _ = owned
    await storage.delete_task(task.id)
    return Response(status_code=204)
