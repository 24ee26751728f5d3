from typing import List
from fastapi import APIRouter, Depends

from models import Dream
from schemas import ResourceCreate, ResourceResponse
from security import get_owned_dream
from storage import storage

router = APIRouter()


@router.get("/dreams/{dream_id}/resources", response_model=List[ResourceResponse])
async def get_dream_resources(dream: Dream = Depends(get_owned_dream)):
    return await storage.get_resources_by_dream_id(dream.id)


@router.post("/dreams/{dream_id}/resources", response_model=ResourceResponse, status_code=201)
async def create_resource(payload: ResourceCreate, dream: Dream = Depends(get_owned_dream)):
    return await storage.create_resource(dream.id, payload.model_dump())
