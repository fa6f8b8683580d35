from fastapi import FastAPI

from review_sync.config import settings
from review_sync.core.logging_config import configure_logging
from review_sync.routes import events, github_webhook

configure_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description="Mirrors GitHub pull request activity into the local review store",
)

app.include_router(github_webhook.router)
app.include_router(events.router)
