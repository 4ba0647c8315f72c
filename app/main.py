"""Event Registration Web Application."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.database import create_db_and_tables
from app.registration.errors import RegistrationError
from app.routes import attendees, events, tickets, users
from app.routes import settings as settings_routes

# Configure logging
log_config = {
    "level": logging.DEBUG if settings.debug else logging.INFO,
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}
if settings.log_file:
    log_file = Path(settings.log_file).expanduser()
    log_file.parent.mkdir(parents=True, exist_ok=True)
    log_config["filename"] = str(log_file)

logging.basicConfig(**log_config)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    logger.info("Starting Event Registration application")
    create_db_and_tables()
    yield
    logger.info("Event Registration application shut down")


app = FastAPI(
    title=settings.app_name,
    description="Event registration, attendee approval and venue check-in",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for the web client
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


@app.exception_handler(RegistrationError)
async def registration_error_handler(request: Request, exc: RegistrationError):
    """Render expected failures as {"detail", "code"} with their status."""
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


# Include routers
app.include_router(events.router)
app.include_router(attendees.router)
app.include_router(settings_routes.router)
app.include_router(tickets.router)
app.include_router(users.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, reload=False)
