from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
import uvicorn

from poll_app.db.database import engine, Base
from poll_app.api.endpoints import auth, polls, options, notifications
from poll_app.core.config import get_settings
from poll_app.core.exception import (
    PollAppError,
    poll_app_exception_handler,
    validation_exception_handler,
    http_exception_handler,
    database_exception_handler,
    general_exception_handler
)
from poll_app.core.constants import APIConfig, LoggingConfig

# Import models to register them with SQLAlchemy
from poll_app.models import user, polls as poll_models, notification  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables in the database
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")
    yield


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=APIConfig.API_TITLE,
        description=APIConfig.API_DESCRIPTION,
        version=APIConfig.API_VERSION,
        lifespan=lifespan
    )

    # Add CORS middleware
    allowed_origins = [settings.frontend_url] + [
        origin for origin in APIConfig.DEV_ORIGINS if origin != settings.frontend_url
    ]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=APIConfig.ALLOWED_METHODS,
        allow_headers=APIConfig.ALLOWED_HEADERS,
    )

    # Register exception handlers
    app.add_exception_handler(PollAppError, poll_app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Include routers with centralized prefix
    app.include_router(auth.router, prefix=APIConfig.API_PREFIX)
    app.include_router(polls.router, prefix=APIConfig.API_PREFIX)
    app.include_router(options.router, prefix=APIConfig.API_PREFIX)
    app.include_router(notifications.router, prefix=APIConfig.API_PREFIX)

    @app.get("/")
    def read_root():
        return {"message": "Welcome to the Poll App API!"}

    return app


logging.basicConfig(
    level=get_settings().log_level.upper(),
    format=LoggingConfig.LOG_FORMAT,
    datefmt=LoggingConfig.DATE_FORMAT
)

app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
