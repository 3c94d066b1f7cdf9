from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from pathlib import Path

from habitarcade.database import engine, Base
from habitarcade import models  # Import all models to register them with Base
from habitarcade.routes import habits, tasks, settings
from habitarcade.scheduler import start_scheduler, stop_scheduler
from habitarcade.constants import (
    LOG_DIR, LOG_FILE, DEFAULT_LOG_DIRECTORY_DEV,
    CORS_ALLOWED_ORIGINS, SCHEDULER_ENABLED
)

log_dir = LOG_DIR

# Create log directory if it doesn't exist (for development)
try:
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    log_path = Path(log_dir) / LOG_FILE
except PermissionError:
    # Fallback to local directory if no permissions for /var/log
    log_dir = DEFAULT_LOG_DIRECTORY_DEV
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    log_path = Path(log_dir) / LOG_FILE

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler()  # Also log to console
    ]
)

logger = logging.getLogger("habitarcade")

# Create database tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="HabitArcade API",
    description="Habit tracker with day boundaries, hierarchies and missed-day auto-fill",
    version="1.0.0"
)

# CORS settings for the frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(habits.router)
app.include_router(tasks.router)
app.include_router(settings.router)


# Startup event
@app.on_event("startup")
async def startup_event():
    logger.info(f"HabitArcade API started. Logging to: {log_path}")
    if SCHEDULER_ENABLED:
        start_scheduler()


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down HabitArcade API")
    stop_scheduler()


# Health check
@app.get("/")
async def root():
    return {"message": "HabitArcade API", "status": "active"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
