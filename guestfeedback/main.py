"""
Guest Feedback - Main Application Entry Point
Multi-tenant guest review collection for hotels
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
import structlog

from guestfeedback import __version__
from guestfeedback.core.config import get_settings
from guestfeedback.core.database import init_db
from guestfeedback.core.errors import DependencyFailure, FeedbackError, ValidationError
from guestfeedback.core.notifications import EVENT_TYPES, NotificationDispatcher, log_delivery
from guestfeedback.api import (
    admin, auth, forms, hotels, notifications,
    payment_methods, public, reviews, users, webhooks
)

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = structlog.get_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info("Initializing Guest Feedback backend")
    if settings.AUTO_CREATE_TABLES:
        init_db()

    yield

    # Shutdown
    logger.info("Shutting down Guest Feedback backend")


def build_dispatcher() -> NotificationDispatcher:
    dispatcher = NotificationDispatcher()
    for event_type in EVENT_TYPES:
        dispatcher.subscribe(event_type.__name__, log_delivery)
    return dispatcher


async def feedback_error_handler(request: Request, exc: FeedbackError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "code": "invalid",
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    error = ValidationError(problems)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error", path=request.url.path, error=str(exc), exc_info=True)
    error = DependencyFailure()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def create_app() -> FastAPI:
    """Build the application with routers, handlers and the dispatcher"""
    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Multi-tenant guest feedback collection for hotels",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.dispatcher = build_dispatcher()

    # Configure middleware stack
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(FeedbackError, feedback_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)

    # Include routers
    prefix = settings.API_V1_PREFIX
    app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["auth"])
    app.include_router(users.router, prefix=f"{prefix}/users", tags=["users"])
    app.include_router(hotels.router, prefix=f"{prefix}/hotels", tags=["hotels"])
    app.include_router(forms.router, prefix=f"{prefix}/forms", tags=["forms"])
    app.include_router(reviews.router, prefix=f"{prefix}/reviews", tags=["reviews"])
    app.include_router(public.router, prefix=f"{prefix}/public", tags=["public"])
    app.include_router(notifications.router, prefix=f"{prefix}/notifications", tags=["notifications"])
    app.include_router(payment_methods.router, prefix=f"{prefix}/payment-methods", tags=["payment-methods"])
    app.include_router(admin.router, prefix=f"{prefix}/admin", tags=["admin"])
    app.include_router(webhooks.router, prefix=f"{prefix}/webhooks", tags=["webhooks"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "service": "guest-feedback-api"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "guestfeedback.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )
