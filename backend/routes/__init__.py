from .auth import router as auth_router
from .dreams import router as dreams_router
from .tasks import router as tasks_router
from .resources import router as resources_router
from .vision import router as vision_router

__all__ = ["auth_router", "dreams_router", "tasks_router", "resources_router", "vision_router"]
