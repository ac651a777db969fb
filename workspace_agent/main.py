"""
FastAPI application exposing the agent over HTTP.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from workspace_agent.api.routers import router as api_router
from workspace_agent.container import container

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Get logger for this module
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = container.get_settings()
    logger.info(f"Serving workspace {settings.workspace_root} with model {settings.openai_model}")
    yield
    await container.close()


# Create FastAPI app
app = FastAPI(title="Workspace Agent API", lifespan=lifespan)
app.include_router(api_router)
