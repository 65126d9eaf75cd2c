"""Main FastAPI application"""
import asyncio
import contextlib
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.utils.logger import setup_file_logging
from app.api.v1.api import api_router
from app.realtime.relay import router as relay_router
from app.db.init_db import init_db
from app.services.story_service import run_story_sweeper
from app.errors.exceptions import BaseHTTPException
from app.errors.handlers import (
    app_exception_handler,
    validation_exception_handler,
    sqlalchemy_exception_handler,
    general_exception_handler
)

setup_file_logging(logging.getLevelName(settings.LOG_LEVEL.upper()))
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Social backend: accounts with OTP verification, posts, comments, likes, follows, stories and chat",
    version=settings.PROJECT_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(BaseHTTPException, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

app.include_router(api_router, prefix=settings.API_V1_STR)
app.include_router(relay_router)


@app.get("/")
def read_root():
    return {"message": f"{settings.PROJECT_NAME} running"}


@app.on_event("startup")
async def startup_event():
    """Create tables and start the story sweeper"""
    init_db()
    if settings.STORY_SWEEP_INTERVAL_SECONDS > 0:
        app.state.story_sweeper = asyncio.create_task(
            run_story_sweeper(settings.STORY_SWEEP_INTERVAL_SECONDS)
        )
    logger.warning(f"{settings.PROJECT_NAME} STARTED - Database initialized successfully")


@app.on_event("shutdown")
async def shutdown_event():
    """Stop the sweeper and log application shutdown"""
    sweeper = getattr(app.state, "story_sweeper", None)
    if sweeper is not None:
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper
    logger.warning(f"{settings.PROJECT_NAME} SHUTDOWN")
