"""
Guest Allotment and Seating System - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from seatplan.core.config import settings
from seatplan.core.db import engine, Base
from seatplan.core.errors import SeatplanError
from seatplan.api import routes_admin, routes_public, routes_rsvp, routes_tables, ws
from seatplan.services.repositories import use_firestore
from seatplan.utils.responses import error_response, seatplan_error_response

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    if use_firestore():
        logger.info("Using Firestore backend")
    else:
        # Create database tables
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Guest Allotment and Seating System",
    description="Backend for RSVP reconciliation, attendance totals and table seating",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(SeatplanError)
async def seatplan_error_handler(request: Request, exc: SeatplanError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc}")
    return seatplan_error_response(exc)

@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return error_response(message=str(exc), error_code="invalid_value", status_code=422)

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_rsvp.router, prefix="/rsvp", tags=["rsvp"])
app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])
app.include_router(routes_tables.router, prefix="/admin", tags=["tables"])
app.include_router(ws.router, prefix="/ws", tags=["websocket"])

# Note: Run this ASGI app directly with Uvicorn or Hypercorn. For Gunicorn,
# use `uvicorn.workers.UvicornWorker` instead of wrapping the app.

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
