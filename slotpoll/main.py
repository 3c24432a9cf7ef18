"""Slot Poll web application."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from slotpoll.core.config import settings
from slotpoll.core.database import create_db_and_tables
from slotpoll.core.errors import register_exception_handlers
from slotpoll.routes import auth, calendar, events, responses

# Configure logging
log_dir = Path.home() / ".logs" / "slotpoll"
log_dir.mkdir(parents=True, exist_ok=True)
log_file = log_dir / "latest.log"

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    filename=str(log_file),
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    logger.info("Starting Slot Poll application")
    create_db_and_tables()
    yield
    logger.info("Slot Poll application shut down")


app = FastAPI(
    title=settings.app_name,
    description="Availability polls: collect OK/Maybe/NG answers per candidate slot and pick the best one",
    version="0.1.0",
    lifespan=lifespan,
)

origins = (
    ["*"]
    if settings.allowed_origins == "*"
    else [o.strip() for o in settings.allowed_origins.split(",")]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router)
app.include_router(events.router)
app.include_router(responses.router)
app.include_router(calendar.router)


@app.get("/")
async def root(request: Request):
    """Redirect root to the organizer's events."""
    rp = request.scope.get("root_path", "")
    return RedirectResponse(f"{rp}/events")


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}
