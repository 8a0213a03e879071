"""FastAPI application entry point."""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import Database
from app.logging_config import setup_logging
from app.routers import action_steps, auth, chat, completed_dates, goals


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - owns the single database connection."""
    setup_logging(settings.log_level)

    # Startup
    database = Database(settings.mongodb_url, settings.mongodb_db_name)
    await database.connect()
    app.state.database = database
    yield
    # Shutdown
    await database.disconnect()


app = FastAPI(
    title="Command Centre API",
    description="Backend API for the Goal Command Centre dashboard",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router)
app.include_router(goals.router)
app.include_router(action_steps.router)
app.include_router(completed_dates.router)
app.include_router(chat.router)


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"status": "ok", "message": "Command Centre API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
