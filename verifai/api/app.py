"""FastAPI application for the VerifAI service."""

import contextlib
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..infrastructure.dependencies import get_service_container
from .endpoints import fact_check, health, models

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Open adapter clients on startup and close them on shutdown."""
    container = get_service_container()
    logging.getLogger().setLevel(container.config.log_level)
    await container.initialize()
    await container.get_model_selection_service().load_selected_model()
    logger.info("🚀 VerifAI API started")

    yield  # Application runs here

    await container.shutdown()
    logger.info("👋 VerifAI API stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    application = FastAPI(
        title="VerifAI API",
        description="Local fact-checking with tool-calling models and web search",
        version=health.VERSION,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health.router)
    application.include_router(models.router)
    application.include_router(fact_check.router)
    return application


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = create_app()
