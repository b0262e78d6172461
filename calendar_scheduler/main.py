import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from calendar_scheduler import config
from calendar_scheduler.database import engine
from calendar_scheduler.models import Base
from calendar_scheduler.routes import schedule

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("🗄️ Database tables ready")
    yield


# Create FastAPI app
app = FastAPI(
    title="Calendar Scheduler API",
    description="Constraint-based time-slot suggestions: ranks candidate slots by preferences, energy, timing and workload balance",
    version="1.0.0",
    lifespan=lifespan,
)

# Include routers
app.include_router(schedule.router, prefix="/schedule", tags=["schedule"])


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": "Welcome to Calendar Scheduler API",
        "version": "1.0.0",
        "endpoints": {
            "suggestions": "POST /schedule/suggestions - Ranked slots for an inline calendar",
            "best": "POST /schedule/best - Single best slot for an inline calendar",
            "user_best": "GET /schedule/users/{user_id}/best - Best slot using a stored user's calendar",
            "free_time": "GET /schedule/users/{user_id}/free-time - Free time inside working hours",
            "weights": "GET/PATCH /schedule/weights - Inspect or change scoring weights",
        },
        "swagger_ui": "/docs - Interactive API documentation",
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}


# This allows running the app directly with: python -m calendar_scheduler.main
if __name__ == "__main__":
    import uvicorn
    print("🚀 Starting Calendar Scheduler API...")
    print("📖 API Documentation: http://localhost:8000/docs")
    uvicorn.run("calendar_scheduler.main:app", host="0.0.0.0", port=8000, reload=True)
