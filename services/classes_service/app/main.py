"""FastAPI application for the Classes Service."""
from dotenv import load_dotenv
from fastapi import FastAPI

load_dotenv()

from libs.common.middleware import add_observability_middleware
from libs.db.config import AsyncSessionLocal
from services.classes_service.routers import (
    classes_router,
    public_router,
    sessions_router,
)
from services.classes_service.services.summary import ScheduleSummaryService


def create_app() -> FastAPI:
    """Create and configure the Classes Service FastAPI app."""
    app = FastAPI(
        title="Dojo Classes Service",
        version="0.1.0",
        description="Class scheduling, session generation and conflict checks.",
    )

    # Add observability (structured logging + request tracing)
    add_observability_middleware(app)

    # Summary cache lives for the lifetime of the app
    app.state.schedule_summary = ScheduleSummaryService(AsyncSessionLocal)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "classes"}

    # Fixed /classes/* paths must be registered before /classes/{class_id}
    app.include_router(public_router)
    app.include_router(sessions_router)
    app.include_router(classes_router)

    return app


app = create_app()
