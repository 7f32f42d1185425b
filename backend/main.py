"""
Smart Student Organizer FastAPI Backend

Main entry point for the API server used by the web client.

Architecture:
- FastAPI handles HTTP routing and request/response validation
- Pydantic schemas ensure type safety
- Agents handle task and focus-session business logic
- DashboardAggregator derives stats and smart alerts
- Database provides persistence via SQLite or PostgreSQL

Run with:
    uvicorn backend.main:app --reload --port 8000

Or:
    python -m backend.main
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.routers import (
    auth_router,
    tasks_router,
    focus_sessions_router,
    analytics_router,
)
from backend.dependencies import get_database, get_config
from organizer.integrations.users_service import UsersServiceError

config = get_config()

logging.basicConfig(
    level=config.get("log_level", default="INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("backend")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup verifies the database connection. A missing database is
    logged and reported by /health; the app still starts.
    """
    try:
        db = get_database()
        logger.info(f"Database connected: {type(db).__name__}")
        logger.info(f"Config loaded from: {config.config_dir}")
    except FileNotFoundError as e:
        logger.error(str(e))

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title="Smart Student Organizer API",
    description="""
    Coursework planner API.

    ## Features

    - **Tasks**: Create, update, complete and delete tasks. Priority is
      derived from due date and task type.
    - **Focus sessions**: Log finished Pomodoro blocks
    - **Analytics**: Task counts and today's focus minutes
    - **Alerts**: Overdue, due-soon, start-working and milestone notifications
    """,
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Invalid request bodies and params -> 400 {"error": [issues]}."""
    return JSONResponse(status_code=400, content={"error": jsonable_encoder(exc.errors())})


@app.exception_handler(UsersServiceError)
async def users_service_exception_handler(request: Request, exc: UsersServiceError):
    """The identity provider failed; report it as a bad gateway."""
    logger.error(f"Users service error on {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": "Users service unavailable"})


app.include_router(auth_router)
app.include_router(tasks_router)
app.include_router(focus_sessions_router)
app.include_router(analytics_router)


@app.get("/")
async def root():
    """API root - returns basic info and available endpoints."""
    return {
        "name": "Smart Student Organizer API",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "tasks": "/api/tasks",
            "focus_sessions": "/api/focus-sessions",
            "stats": "/api/analytics/stats",
            "alerts": "/api/alerts",
            "dashboard": "/api/dashboard",
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    try:
        db = get_database()
        db.ping()
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        logger.warning(f"Health check failed: {e}")
        return {"status": "unhealthy", "error": str(e)}


# Allow running directly with: python -m backend.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
