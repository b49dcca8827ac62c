"""FastAPI application for the job pipeline dashboard service."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from job_pipeline.clients.airtable_client import AirtableClient
from job_pipeline.clients.build_client import BuildServiceClient
from job_pipeline.clients.openai_client import TextGenerationClient
from job_pipeline.logging import configure_logging
from job_pipeline.repository import JobRepository
from job_pipeline.utils import utc_now
from job_pipeline.views import StaleViewRegistry

from .config import get_settings
from .routes.actions import router as actions_router
from .routes.health import router as health_router
from .routes.views import router as views_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize persistent clients at startup, clean up at shutdown."""
    settings = get_settings()
    configure_logging(json_output=settings.LOG_JSON, log_level=settings.LOG_LEVEL)

    logger.info("lifespan.startup", base_id=settings.AIRTABLE_BASE_ID)

    airtable = AirtableClient(
        api_key=settings.AIRTABLE_API_KEY,
        base_id=settings.AIRTABLE_BASE_ID,
        api_url=settings.AIRTABLE_API_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    build_client = BuildServiceClient(
        base_url=settings.JOB_PULSE_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )

    # Follow-up drafting is optional
    text_client: TextGenerationClient | None = None
    if settings.OPENAI_API_KEY:
        text_client = TextGenerationClient(
            api_key=settings.OPENAI_API_KEY,
            chat_model=settings.OPENAI_CHAT_MODEL,
            max_tokens=settings.OPENAI_MAX_TOKENS,
        )
    else:
        logger.warning("lifespan.text_generation_disabled")

    # Store on app.state for request handlers
    app.state.airtable = airtable
    app.state.build_client = build_client
    app.state.text_client = text_client
    app.state.repository = JobRepository(airtable)
    app.state.views = StaleViewRegistry()
    app.state.neetocal_link = settings.NEETO_CAL_LINK
    app.state.clock = utc_now

    logger.info("lifespan.ready")
    yield

    # Shutdown
    logger.info("lifespan.shutdown")
    await airtable.close()
    await build_client.close()
    if text_client is not None:
        await text_client.close()


app = FastAPI(
    title="job-pipeline",
    description="Job sales pipeline: approval queue, send queue, follow-ups and closing board",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(views_router)
app.include_router(actions_router)
