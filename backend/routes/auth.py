from fastapi import APIRouter, Depends, HTTPException, Request
import structlog

from models import User
from schemas import UserCreate, UserLogin, UserResponse
from security import get_current_user, hash_password, login_session, logout_session, verify_password
from storage import storage

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(payload: UserCreate, request: Request):
    if await storage.get_user_by_username(payload.username):
        logger.info("Registration rejected, username taken", username=payload.username)
        raise HTTPException(status_code=400, detail="Username already exists")

    user = await storage.create_user(payload.username, hash_password(payload.password))
    login_session(request, user)
    logger.info("User registered", user_id=user.id)
    return user


@router.post("/login", response_model=UserResponse)
async def login(payload: UserLogin, request: Request):
    user = await storage.get_user_by_username(payload.username)
    if user is None or not verify_password(payload.password, user.password):
        logger.info("Login failed", username=payload.username)
        raise HTTPException(status_code=401, detail="Invalid username or password")

    login_session(request, user)
    logger.info("User logged in", user_id=user.id)
    return user


@router.post("/logout")
async def logout(request: Request):
    logout_session(request)
    return {"message": "Logged out"}


@router.get("/user", response_model=UserResponse)
async def current_user(user: User = Depends(get_current_user)):
    """Return the logged-in user"""
    return user
