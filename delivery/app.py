"""Main FastAPI application with modularized routes."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.logging_setup import setup_console_logging
from delivery.config import LOG_LEVEL
from delivery.database import init_db
from delivery.routes import assessments, sessions, submissions
from delivery.services.cleanup_service import schedule_sessions_cleanup

setup_console_logging(LOG_LEVEL)

app = FastAPI(title="Assessment Delivery API")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Startup events
@app.on_event("startup")
def startup_events() -> None:
    """Initialize database and schedule session cleanup on startup."""
    init_db()
    schedule_sessions_cleanup()


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# Include routers
app.include_router(assessments.router)
app.include_router(sessions.router)
app.include_router(submissions.router)
