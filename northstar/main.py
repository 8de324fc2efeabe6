"""Main FastAPI application."""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from northstar.config import Settings, settings
from northstar.errors import InvalidPayloadError, UnknownActionError
from northstar.gateway import ModelGateway
from northstar.stages import routes as stage_routes
from northstar.stages.orchestrator import StageOrchestrator
from northstar.stages.pipeline import DecisionPipeline
from northstar.stages.schemas import StageAction


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def unknown_action_handler(request: Request, exc: UnknownActionError):
    supported = ", ".join(action.value for action in StageAction)
    return JSONResponse(
        status_code=400,
        content=stage_routes.error_body(str(exc), f"Supported actions: {supported}"),
    )


async def invalid_payload_handler(request: Request, exc: InvalidPayloadError):
    return JSONResponse(
        status_code=422,
        content=stage_routes.error_body(str(exc), exc.details),
    )


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    The settings object is resolved once here and handed to the gateway;
    nothing downstream reads the environment.
    """
    app_settings = app_settings or settings
    configure_logging(app_settings.LOG_LEVEL)

    app = FastAPI(
        title="NorthStar API",
        description="Decision timelines, tradeoffs, 90-day plans and trailers",
        version="0.1.0",
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    gateway = ModelGateway(app_settings)
    app.state.settings = app_settings
    app.state.gateway = gateway
    app.state.pipeline = DecisionPipeline(StageOrchestrator(gateway))

    app.add_exception_handler(UnknownActionError, unknown_action_handler)
    app.add_exception_handler(InvalidPayloadError, invalid_payload_handler)

    app.include_router(stage_routes.router, prefix=app_settings.API_V1_PREFIX, tags=["NorthStar"])

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "NorthStar API",
            "version": "0.1.0",
            "docs": "/docs",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "provider": gateway.tier,
            "model": gateway.model,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "northstar.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
