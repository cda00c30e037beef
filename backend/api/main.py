"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
"""
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pathlib import Path
from dotenv import load_dotenv
from starlette.middleware.base import BaseHTTPMiddleware

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.routes import dumps, events
from db import init_db
from settings import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


class PrivateNetworkAccessMiddleware(BaseHTTPMiddleware):
    """
    Lets a front end served from a public origin reach the API on localhost.

    Browsers ask with `Access-Control-Request-Private-Network: true` on the
    CORS preflight; the grant is added to whatever the inner app answered.
    """

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        if request.headers.get("access-control-request-private-network") == "true":
            response.headers["Access-Control-Allow-Private-Network"] = "true"
        return response


# Create app
app = FastAPI(
    title="Daylog API",
    description="API for registering day events and composing photo dumps",
    version="0.1.0",
)

# CORS for the local front end; origins come from DAYLOG_CORS_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

# Added last so it wraps the CORS preflight answer
app.add_middleware(PrivateNetworkAccessMiddleware)

# Include routers
app.include_router(events.router, prefix="/events", tags=["events"])
app.include_router(dumps.router, prefix="/events/{event_id}", tags=["dumps"])
app.include_router(dumps.catalog_router, tags=["catalog"])


@app.on_event("startup")
def startup_event():
    """Initialize database tables on startup."""
    init_db()


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Daylog API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
