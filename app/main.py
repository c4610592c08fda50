"""FastAPI application entry point."""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.api import (
    auth,
    projects,
    milestones,
    tasks,
    budget_items,
    stakeholders,
    project_files,
    time_entries,
    time_calendar,
    activity_log,
    crew,
    adhoc_requests,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Project Portfolio API", version="1.0.0")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(projects.router, prefix="/projects", tags=["projects"])
# Project sub-resources
app.include_router(milestones.router, prefix="/projects", tags=["milestones"])
app.include_router(tasks.router, prefix="/projects", tags=["tasks"])
app.include_router(budget_items.router, prefix="/projects", tags=["budget"])
app.include_router(stakeholders.router, prefix="/projects", tags=["stakeholders"])
app.include_router(project_files.router, prefix="/projects", tags=["files"])
# Time tracking
app.include_router(time_entries.project_router, prefix="/projects", tags=["time-entries"])
app.include_router(time_entries.router, prefix="/time-entries", tags=["time-entries"])
app.include_router(time_calendar.router, prefix="/projects", tags=["time-calendar"])
# Activity audit log
app.include_router(activity_log.project_router, prefix="/projects", tags=["activity-log"])
app.include_router(activity_log.router, prefix="/activity-log", tags=["activity-log"])
# Staff and unplanned work
app.include_router(crew.router, prefix="/crew", tags=["crew"])
app.include_router(adhoc_requests.router, prefix="/adhoc-requests", tags=["adhoc-requests"])


@app.get("/")
def read_root():
    return {"message": "Project Portfolio API"}
