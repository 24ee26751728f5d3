"""
Persistence gateway: one coroutine per entity operation, each in its own session
"""
import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import select, delete, case
from database import get_db_session
from models import User, Dream, Task, Resource, VisionItem

logger = logging.getLogger(__name__)

INITIAL_AI_CONFIDENCE = 75

# Lower rank sorts first
PRIORITY_RANK = case(
    (Task.priority == "High", 0),
    (Task.priority == "Medium", 1),
    else_=2,
)


class NotFoundError(Exception):
    """Raised when an update targets a row that does not exist"""

    def __init__(self, entity: str, entity_id: int):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID {entity_id} not found")


class DatabaseStorage:

    # User methods
    async def get_user(self, user_id: int) -> Optional[User]:
        async with get_db_session() as db:
            return await db.get(User, user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        async with get_db_session() as db:
            result = await db.execute(select(User).where(User.username == username))
            return result.scalar_one_or_none()

    async def create_user(self, username: str, password_hash: str) -> User:
        async with get_db_session() as db:
            user = User(username=username, password=password_hash)
            db.add(user)
            await db.commit()
            await db.refresh(user)
            logger.info(f"Created user {user.id}")
            return user

    # Dream methods
    async def get_dreams_by_user_id(self, user_id: int) -> List[Dream]:
        async with get_db_session() as db:
            result = await db.execute(select(Dream).where(Dream.user_id == user_id).order_by(Dream.id))
            return list(result.scalars().all())

    async def get_dream_by_id(self, dream_id: int) -> Optional[Dream]:
        async with get_db_session() as db:
            return await db.get(Dream, dream_id)

    async def create_dream(self, user_id: int, values: Dict[str, Any]) -> Dream:
        async with get_db_session() as db:
            dream = Dream(
                **values,
                user_id=user_id,
                next_action="",
                ai_confidence=INITIAL_AI_CONFIDENCE,
            )
            db.add(dream)
            await db.commit()
            await db.refresh(dream)
            logger.info(f"Created dream {dream.id} for user {user_id}")
            return dream

    async def update_dream(self, dream_id: int, updates: Dict[str, Any]) -> Dream:
        async with get_db_session() as db:
            dream = await db.get(Dream, dream_id)
            if dream is None:
                raise NotFoundError("Dream", dream_id)

            for field, value in updates.items():
                if field in ("id", "user_id"):
                    continue
                setattr(dream, field, value)
            await db.commit()
            await db.refresh(dream)
            return dream

    async def delete_dream(self, dream_id: int) -> None:
        # Children first to satisfy foreign keys; one transaction for all four
        async with get_db_session() as db:
            await db.execute(delete(VisionItem).where(VisionItem.dream_id == dream_id))
            await db.execute(delete(Resource).where(Resource.dream_id == dream_id))
            await db.execute(delete(Task).where(Task.dream_id == dream_id))
            await db.execute(delete(Dream).where(Dream.id == dream_id))
        logger.info(f"Deleted dream {dream_id} and its tasks, resources and vision items")

    # Task methods
    async def get_tasks_by_dream_id(self, dream_id: int) -> List[Task]:
        """Pending tasks by priority then due date, followed by Done tasks in storage order"""
        async with get_db_session() as db:
            pending = await db.execute(
                select(Task)
                .where(Task.dream_id == dream_id, Task.status != "Done")
                .order_by(PRIORITY_RANK, Task.due_date.is_(None), Task.due_date, Task.id)
            )
            completed = await db.execute(
                select(Task)
                .where(Task.dream_id == dream_id, Task.status == "Done")
                .order_by(Task.id)
            )
            return list(pending.scalars().all()) + list(completed.scalars().all())

    async def get_task_by_id(self, task_id: int) -> Optional[Task]:
        async with get_db_session() as db:
            return await db.get(Task, task_id)

    async def create_task(self, dream_id: int, values: Dict[str, Any]) -> Task:
        async with get_db_session() as db:
            task = Task(**values, dream_id=dream_id)
            db.add(task)
            await db.commit()
            await db.refresh(task)
            return task

    async def update_task(self, task_id: int, updates: Dict[str, Any]) -> Task:
        async with get_db_session() as db:
            task = await db.get(Task, task_id)
            if task is None:
                raise NotFoundError("Task", task_id)

            for field, value in updates.items():
                if field in ("id", "dream_id"):
                    continue
                setattr(task, field, value)
            await db.commit()
            await db.refresh(task)
            return task

    async def delete_task(self, task_id: int) -> None:
        async with get_db_session() as db:
            await db.execute(delete(Task).where(Task.id == task_id))

    # Resource methods
    async def get_resources_by_dream_id(self, dream_id: int) -> List[Resource]:
        async with get_db_session() as db:
            result = await db.execute(select(Resource).where(Resource.dream_id == dream_id).order_by(Resource.id))
            return list(result.scalars().all())

    async def create_resource(self, dream_id: int, values: Dict[str, Any]) -> Resource:
        async with get_db_session() as db:
            resource = Resource(**values, dream_id=dream_id)
            db.add(resource)
            await db.commit()
            await db.refresh(resource)
            return resource

    # Vision item methods
    async def get_vision_items_by_dream_id(self, dream_id: int) -> List[VisionItem]:
        async with get_db_session() as db:
            result = await db.execute(select(VisionItem).where(VisionItem.dream_id == dream_id).order_by(VisionItem.id))
            return list(result.scalars().all())

    async def create_vision_item(self, dream_id: int, values: Dict[str, Any]) -> VisionItem:
        async with get_db_session() as db:
            vision_item = VisionItem(**values, dream_id=dream_id)
            db.add(vision_item)
            await db.commit()
            await db.refresh(vision_item)
            return vision_item


storage = DatabaseStorage()
