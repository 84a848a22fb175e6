"""
Reminder Bot API - Main FastAPI Application.

Receives Slack events and button clicks for the daily NeedPhotoNoShip
reminder email.
"""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse

from reminderbot import __version__
from reminderbot.config import get_settings
from reminderbot.utils.logging import setup_logging

# Load environment variables
load_dotenv()

# Configure logging early
setup_logging("reminderbot")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    from reminderbot.worker.handlers import resolve_trello_at_startup

    settings = get_settings()
    print("🚀 Starting daily-needphotonoship-reminder bot...")
    print(f"   Watching channel ID: {settings.watch_channel or '(not set)'}")
    print(f"   Shopify API version: {settings.shopify_api_version}")
    if not settings.slack_signing_secret:
        if settings.slack_skip_signature_check:
            print("   ⚠️  Slack signature check disabled (SLACK_SKIP_SIGNATURE_CHECK)")
        else:
            print("   ⚠️  SLACK_SIGNING_SECRET not set, Slack requests will be rejected")

    if await run_in_threadpool(resolve_trello_at_startup):
        print("   Trello: board/list resolved")
    else:
        print("   Trello: board/list resolution failed, will retry on first use")

    yield

    print("👋 Shutting down reminder bot...")


app = FastAPI(
    title="Reminder Bot API",
    description=(
        "Watches a Slack channel for the daily NeedPhotoNoShip reminder email and "
        "offers per-order actions: clear the follow-up state in Shopify, or "
        "create a Trello card."
    ),
    version=__version__,
    lifespan=lifespan,
)


@app.get("/", tags=["system"], operation_id="getServiceInfo")
async def root():
    """Return basic information about the service."""
    return {
        "service": "Reminder Bot API",
        "version": __version__,
        "status": "operational",
    }


@app.get("/health", tags=["system"], operation_id="healthCheck")
async def health_check():
    return {"status": "healthy", "service": "reminderbot"}


@app.get("/wake", tags=["system"], response_class=PlainTextResponse)
async def wake():
    """Keep-alive endpoint for hosts that idle inactive services."""
    return "awake"


@app.get("/version", tags=["system"], operation_id="getVersion")
async def version():
    return {"SHOPIFY_API_VERSION": get_settings().shopify_api_version}


from reminderbot.api.routes import slack

app.include_router(slack.router, tags=["slack"])
