"""
Request and response schemas. JSON bodies use camelCase keys.
"""
from datetime import datetime, timezone
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

TaskStatus = Literal["To-Do", "Doing", "Done"]
TaskPriority = Literal["Low", "Medium", "High"]
ResourceType = Literal["article", "video", "tool"]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )


def _required_text(v: str) -> str:
    if not isinstance(v, str) or not v.strip():
        raise ValueError("must be a non-empty string")
    return v.strip()


def _as_utc(v: Optional[datetime]) -> Optional[datetime]:
    # Naive timestamps are taken as UTC; SQLite keeps only the wall-clock text
    if v is None:
        return None
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


# Users

class UserCreate(CamelModel):
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6, max_length=128)

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        return _required_text(v)


class UserLogin(CamelModel):
    username: str
    password: str


class UserResponse(CamelModel):
    id: int
    username: str
    created_at: Optional[datetime] = None


# Dreams

class DreamCreate(CamelModel):
    title: str
    description: Optional[str] = None
    cover_image: Optional[str] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        return _required_text(v)


class DreamUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    cover_image: Optional[str] = None
    next_action: Optional[str] = None
    ai_confidence: Optional[int] = Field(default=None, ge=0, le=100)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if v is None:
            raise ValueError("title cannot be null")
        return _required_text(v)


class DreamResponse(CamelModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    cover_image: Optional[str] = None
    next_action: Optional[str] = None
    ai_confidence: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Tasks

class TaskCreate(CamelModel):
    title: str
    description: Optional[str] = None
    status: TaskStatus = "To-Do"
    priority: TaskPriority = "Medium"
    due_date: Optional[datetime] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        return _required_text(v)

    @field_validator('due_date')
    @classmethod
    def normalize_due_date(cls, v):
        return _as_utc(v)


class TaskUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None

    @field_validator('title', 'status', 'priority')
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v.strip() if info.field_name == 'title' and isinstance(v, str) else v

    @field_validator('due_date')
    @classmethod
    def normalize_due_date(cls, v):
        return _as_utc(v)


class TaskResponse(CamelModel):
    id: int
    dream_id: int
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator('due_date', 'completed_at')
    @classmethod
    def mark_utc(cls, v):
        return _as_utc(v)


# Resources

class ResourceCreate(CamelModel):
    title: str
    description: Optional[str] = None
    type: ResourceType
    url: str
    is_verified: bool = False
    is_free: bool = True
    read_time: Optional[int] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, ge=0)

    @field_validator('title', 'url')
    @classmethod
    def validate_text(cls, v):
        return _required_text(v)


class ResourceResponse(CamelModel):
    id: int
    dream_id: int
    title: str
    description: Optional[str] = None
    type: str
    url: str
    is_verified: Optional[bool] = None
    is_free: Optional[bool] = None
    read_time: Optional[int] = None
    duration: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Vision gallery

class VisionItemCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    type: str = Field(default="image", min_length=1, max_length=20)
    url: str

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        return _required_text(v)


class VisionItemResponse(CamelModel):
    id: int
    dream_id: int
    title: Optional[str] = None
    description: Optional[str] = None
    type: str
    url: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Errors

class FieldError(BaseModel):
    path: str
    message: str


class ValidationErrorResponse(BaseModel):
    detail: str = "Validation failed"
    errors: List[FieldError]
