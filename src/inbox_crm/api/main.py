"""FastAPI application for the inbox CRM service."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from inbox_crm.clients.openai_client import OpenAIClient
from inbox_crm.controller import CrmController
from inbox_crm.errors import ConfigurationError
from inbox_crm.pipeline.extractor import DealExtractor
from inbox_crm.seed import build_demo_store
from inbox_crm.store import CrmStore

from .config import get_settings
from .routes.crm import router as crm_router
from .routes.emails import router as emails_router
from .routes.health import router as health_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the CRM state and the OpenAI client at startup, clean up at shutdown."""
    settings = get_settings()
    store = build_demo_store() if settings.SEED_DEMO_DATA else CrmStore()
    logger.info(
        "lifespan.startup",
        seeded=settings.SEED_DEMO_DATA,
        contacts=len(store.contacts),
        deals=len(store.deals),
        emails=len(store.emails),
    )

    # OpenAI: a missing key disables analysis only
    openai: OpenAIClient | None = None
    try:
        openai = OpenAIClient(
            api_key=settings.OPENAI_API_KEY or None,
            chat_model=settings.OPENAI_CHAT_MODEL,
        )
    except ConfigurationError as e:
        logger.warning("lifespan.analysis_disabled", error=e.message)

    # Store on app.state for request handlers
    app.state.openai = openai
    app.state.controller = CrmController(store=store, extractor=DealExtractor(openai))

    logger.info("lifespan.ready", analysis_enabled=openai is not None)
    yield

    # Shutdown
    logger.info("lifespan.shutdown")
    if openai is not None:
        await openai.close()


app = FastAPI(
    title="inbox-crm",
    description="Lightweight CRM beside an email inbox, with AI deal extraction from emails",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(emails_router)
app.include_router(crm_router)
