from typing import List
from fastapi import APIRouter, BackgroundTasks, Depends, Response
import logging

from enrichment import enrich_new_dream
from models import Dream, User
from schemas import DreamCreate, DreamResponse, DreamUpdate
from security import get_current_user, get_owned_dream
from storage import storage

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/dreams", response_model=List[DreamResponse])
async def list_dreams(user: User = Depends(get_current_user)):
    return await storage.get_dreams_by_user_id(user.id)


@router.post("/dreams", response_model=DreamResponse, status_code=201)
async def create_dream(
    payload: DreamCreate,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
):
    """
    Create a dream and schedule AI timeline and resource suggestions for it
    """
    dream = await storage.create_dream(user.id, payload.model_dump())
    background_tasks.add_task(enrich_new_dream, dream.id, dream.title, dream.description)
    logger.info(f"Dream {dream.id} created, enrichment scheduled")
    return dream


@router.get("/dreams/{dream_id}", response_model=DreamResponse)
async def get_dream(dream: Dream = Depends(get_owned_dream)):
    return dream


@router.patch("/dreams/{dream_id}", response_model=DreamResponse)
async def update_dream(payload: DreamUpdate, dream: Dream = Depends(get_owned_dream)):
    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        return dream
    return await storage.update_dream(dream.id, updates)


@router.delete("/dreams/{dream_id}", status_code=204)
async def delete_dream(dream: Dream = Depends(get_owned_dream)):
    await storage.delete_dream(dream.id)
    return Response(status_code=204)
