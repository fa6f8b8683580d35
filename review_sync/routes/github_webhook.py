import json
import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from review_sync.config import settings
from review_sync.core.signatures import verify_signature
from review_sync.database import get_db
from review_sync.services.errors import error_message
from review_sync.services.ingest import ingest_github_event

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["GitHub Webhook"])


@router.post("/github-webhook")
async def handle_github_webhook(
    request: Request,
    x_github_event: str | None = Header(None),
    x_github_delivery: str | None = Header(None),
    x_hub_signature_256: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
):
    """Receive a GitHub webhook delivery.

    The signature is checked against the raw body before anything is parsed
    or stored.  ``ping`` deliveries are acknowledged without being recorded.
    """
    secret = settings.GITHUB_WEBHOOK_SECRET
    if not secret:
        logger.error("GITHUB_WEBHOOK_SECRET is not configured")
        raise HTTPException(status_code=500, detail="Webhook secret not configured")

    if not x_github_event or not x_github_delivery or not x_hub_signature_256:
        raise HTTPException(status_code=400, detail="Missing GitHub webhook headers")

    body = await request.body()
    if not verify_signature(secret, body, x_hub_signature_256):
        logger.warning(
            "Rejected GitHub delivery %s (%s): invalid signature",
            x_github_delivery,
            x_github_event,
        )
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        payload = json.loads(body)
    except ValueError:
        logger.warning("Invalid JSON in GitHub delivery %s", x_github_delivery)
        raise HTTPException(status_code=400, detail="Invalid JSON payload")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON payload")

    if x_github_event == "ping":
        return {"status": "ok"}

    action = payload.get("action")
    if not isinstance(action, str):
        action = None

    try:
        result = await ingest_github_event(
            db,
            delivery_id=x_github_delivery,
            github_event=x_github_event,
            action=action,
            payload=payload,
        )
    except Exception as exc:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to process webhook: {error_message(exc)}",
        )

    return {
        "status": "ok",
        "processed": not result.already_processed,
        "eventStatus": result.status.value,
    }
