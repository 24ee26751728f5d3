from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware
import logging

# Load environment variables FIRST
from dotenv import load_dotenv
load_dotenv('.env')

from config import get_settings, validate_required_settings
from logging_config import setup_logging
from routes import auth_router, dreams_router, tasks_router, resources_router, vision_router
from database import engine
from middleware import RequestLoggingMiddleware, SessionRequiredMiddleware
from models import Base
from schemas import FieldError, ValidationErrorResponse
from storage import NotFoundError

setup_logging()
logger = logging.getLogger(__name__)

# Initialize settings
settings = get_settings()

# Validate configuration
try:
    validate_required_settings()
    logger.info("Configuration validated successfully")
except ValueError as e:
    logger.error(f"Configuration validation failed: {str(e)}")
    raise

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info(f"Starting DreamBoard API - Version: {settings.api_version}")

    # Create database tables
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Failed to create database tables: {str(e)}")
        raise

    yield
    # Shutdown
    await engine.dispose()
    logger.info("Shutting down DreamBoard API")

# Create FastAPI app
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description=settings.api_description,
    debug=settings.debug,
    lifespan=lifespan
)

# Add custom middleware; the session gate sits inside SessionMiddleware
app.add_middleware(
    SessionRequiredMiddleware,
    public_paths={"/api/register", "/api/login", "/api/logout"},
)
app.add_middleware(RequestLoggingMiddleware)

# Login state lives in a signed cookie
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret_key,
    session_cookie=settings.session_cookie_name,
    max_age=settings.session_max_age,
    same_site="lax",
)

# The SPA is served from its own origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Schema failures answer 400 with one entry per offending field"""
    errors = [
        FieldError(
            path=".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            message=error.get("msg", "Invalid value"),
        )
        for error in exc.errors()
    ]
    logger.info(f"Validation failed - Path: {request.url.path}, Errors: {len(errors)}")
    return JSONResponse(
        status_code=400,
        content=ValidationErrorResponse(errors=errors).model_dump()
    )

@app.exception_handler(NotFoundError)
async def not_found_exception_handler(request: Request, exc: NotFoundError):
    return JSONResponse(
        status_code=404,
        content={"detail": str(exc)}
    )

# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors"""
    logger.error(f"Unhandled exception: {str(exc)} - Path: {request.url.path}, Method: {request.method}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )

# Include routers
app.include_router(auth_router, prefix="/api", tags=["auth"])
app.include_router(dreams_router, prefix="/api", tags=["dreams"])
app.include_router(tasks_router, prefix="/api", tags=["tasks"])
app.include_router(resources_router, prefix="/api", tags=["resources"])
app.include_router(vision_router, prefix="/api", tags=["vision"])

@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": "DreamBoard API is running!",
        "version": settings.api_version,
        "docs": "/docs",
        "health": "/health"
    }

@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "version": settings.api_version
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=True
    )
