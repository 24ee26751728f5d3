from typing import List
from fastapi import APIRouter, Depends

from models import Dream
from schemas import VisionItemCreate, VisionItemResponse
from security import get_owned_dream
from storage import storage

router = APIRouter()


@router.get("/dreams/{dream_id}/vision-items", response_model=List[VisionItemResponse])
async def get_vision_items(dream: Dream = Depends(get_owned_dream)):
    """Vision gallery for a dream"""
    return await storage.get_vision_items_by_dream_id(dream.id)


@router.post("/dreams/{dream_id}/vision-items", response_model=VisionItemResponse, status_code=201)
async def create_vision_item(payload: VisionItemCreate, dream: Dream = Depends(get_owned_dream)):
    return await storage.create_vision_item(dream.id, payload.model_dump())
