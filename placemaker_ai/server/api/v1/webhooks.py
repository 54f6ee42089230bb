"""
Inbound email webhook.

The email provider posts every message delivered to a project's address
here; it is filed as an enquiry on the matching project.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Header, HTTPException, status
from pydantic import ValidationError
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database import get_session
from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.models.io.webhooks import InboundEmailResponse, WebhookHealth
from placemaker_ai.server.core.config import settings
from placemaker_ai.server.services.deps import EmailClientDep
from placemaker_ai.server.services.inbound_email import InboundEmailError, parse_payload, receive_inbound_email

logger = get_logger(__name__)

router = APIRouter(tags=["webhooks"])


def verify_webhook(
    authorization: Optional[str] = Header(default=None),
    svix_id: Optional[str] = Header(default=None, alias="svix-id"),
) -> None:
    """Require ``Authorization: Bearer {secret}`` when a webhook secret is configured.

    Deliveries signed by the provider (``svix-id`` header) are accepted as is.
    """
    secret = settings.email.webhook_secret
    if not secret or svix_id:
        return
    if authorization != f"Bearer {secret}":
        logger.warning("Rejected inbound email webhook with bad credentials")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


@router.post(
    "/email",
    response_model=InboundEmailResponse,
    response_model_exclude_none=True,
    summary="Receive Inbound Email",
    description=(
        "Accept an inbound email from the provider and file it as an enquiry. Emails that match "
        "no project are acknowledged with a warning so the provider does not retry."
    ),
    response_description="Where the email was filed.",
    responses={
        400: {"description": "Payload lacks from, to or subject"},
        401: {"description": "Webhook secret missing or wrong"},
    },
    dependencies=[Depends(verify_webhook)],
)
async def receive_email(
    email_client: EmailClientDep,
    payload: Dict[str, Any] = Body(...),
    session: AsyncSession = Depends(get_session),
) -> InboundEmailResponse:
    try:
        email = parse_payload(payload)
    except (InboundEmailError, ValidationError) as e:
        detail = str(e) if isinstance(e, InboundEmailError) else "Invalid email payload"
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
    logger.info(f"Inbound email from {email.sender_email} to {email.recipients}")
    return await receive_inbound_email(session, email_client, email)


@router.get(
    "/email",
    response_model=WebhookHealth,
    summary="Webhook Health",
    description="Confirm the inbound email webhook is reachable.",
)
async def webhook_health() -> WebhookHealth:
    return WebhookHealth(
        status="ok",
        service="inbound-email-webhook",
        timestamp=datetime.now(timezone.utc),
    )
