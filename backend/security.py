"""
Password hashing, session authentication and ownership guards
"""
from typing import Tuple
from fastapi import Depends, HTTPException, Request
from passlib.context import CryptContext

from models import Dream, Task, User
from storage import storage

SESSION_USER_KEY = "user_id"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def login_session(request: Request, user: User) -> None:
    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id


def logout_session(request: Request) -> None:
    request.session.clear()


async def get_current_user(request: Request) -> User:
    """Resolve the session cookie to a user or answer 401"""
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = await storage.get_user(user_id)
    if user is None:
        request.session.clear()
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


async def get_owned_dream(dream_id: int, user: User = Depends(get_current_user)) -> Dream:
    """Path dependency: the dream must exist and belong to the session user"""
    dream = await storage.get_dream_by_id(dream_id)
    if dream is None:
        raise HTTPException(status_code=404, detail="Dream not found")
    if dream.user_id != user.id:
        raise HTTPException(status_code=403, detail="You don't have permission to access this dream")
    return dream


async def get_owned_task(task_id: int, user: User = Depends(get_current_user)) -> Tuple[Task, Dream]:
    """Path dependency: the task's dream must belong to the session user"""
    task = await storage.get_task_by_id(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")

    dream = await storage.get_dream_by_id(task.dream_id)
    if dream is None or dream.user_id != user.id:
        raise HTTPException(status_code=403, detail="You don't have permission to access this task")
    return task, dream
