"""
Inbound email handling.

Turns an email delivered to a project's address into an enquiry, and sends
the project's auto-reply when one is configured.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy import func, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database.entities import Enquiry, EnquiryMessage, Project, Stakeholder
from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.models.domain import EnquiryPriority, EnquiryStatus, MessageType
from placemaker_ai.core.models.io.webhooks import (
    GenericInboundEmail,
    InboundEmailResponse,
    ProviderInboundEvent,
)
from placemaker_ai.integrations.email import ResendClient, send_quietly
from placemaker_ai.integrations.email.templates import auto_reply_email, fill_placeholders

logger = get_logger(__name__)

PROVIDER_EVENT_TYPE = "email.received"
AUTO_REPLY_AUTHOR = "Auto-Reply"
NO_BODY = "(No message body)"

_SENDER = re.compile(r'^(?:"?([^"]*)"?\s)?<?([^>]+@[^>]+)>?$')
_DOMAIN = re.compile(r"@([^>]+)>?$")


class InboundEmailError(ValueError):
    """The webhook payload lacks a field needed to file the email."""


@dataclass
class ParsedInboundEmail:
    sender_email: str
    sender_name: str
    recipients: List[str]
    subject: str
    body: str


def parse_sender(raw: str) -> tuple[str, Optional[str]]:
    """Split ``Name <address>`` into (lower-cased address, name or None)."""
    match = _SENDER.match(raw.strip())
    if match is None:
        return raw.strip().lower(), None
    return match.group(2).strip().lower(), (match.group(1) or None)


def parse_payload(payload: Dict[str, Any]) -> ParsedInboundEmail:
    """Normalise either supported payload shape.

    Raises:
        InboundEmailError: When the generic shape lacks ``from``, ``to`` or ``subject``
    """
    if payload.get("type") == PROVIDER_EVENT_TYPE and payload.get("data"):
        try:
            event = ProviderInboundEvent.model_validate(payload)
        except ValidationError as e:
            raise InboundEmailError("Invalid email.received payload") from e
        address, name = parse_sender(event.data.from_)
        return ParsedInboundEmail(
            sender_email=address,
            sender_name=name or address.split("@")[0],
            recipients=list(event.data.to),
            subject=event.data.subject or "(No Subject)",
            body=event.data.text or event.data.html or NO_BODY,
        )

    email = GenericInboundEmail.model_validate(payload)
    if not email.from_ or not email.to or not email.subject:
        raise InboundEmailError("Missing required fields: from, to, subject")
    address, name = parse_sender(email.from_)
    return ParsedInboundEmail(
        sender_email=address,
        sender_name=email.from_name or name or address.split("@")[0],
        recipients=email.to if isinstance(email.to, list) else [email.to],
        subject=email.subject,
        body=email.text or email.html or NO_BODY,
    )


async def match_project(session: AsyncSession, recipients: List[str]) -> Optional[Project]:
    """First project whose sender address shares a recipient's domain, or equals the recipient."""
    for recipient in recipients:
        domain_match = _DOMAIN.search(recipient)
        if domain_match is None:
            continue
        domain = domain_match.group(1).lower()
        address = recipient.replace("<", "").replace(">", "").strip().lower()
        stmt = (
            select(Project)
            .where(
                or_(
                    Project.email_from_address.iendswith(f"@{domain}", autoescape=True),
                    func.lower(Project.email_from_address) == address,
                )
            )
            .order_by(Project.id)
        )
        project = (await session.exec(stmt)).first()
        if project is not None:
            return project
    return None


async def receive_inbound_email(
    session: AsyncSession, email_client: ResendClient, email: ParsedInboundEmail
) -> InboundEmailResponse:
    """File an inbound email as an enquiry on the matching project.

    When no project matches, a successful response with a warning is
    returned so the provider does not retry the delivery.
    """
    project = await match_project(session, email.recipients)
    if project is None:
        logger.info(f"No matching project found for recipients: {email.recipients}")
        return InboundEmailResponse(success=True, warning="No matching project found", recipients=email.recipients)

    stmt = select(Stakeholder).where(
        Stakeholder.project_id == project.id, func.lower(Stakeholder.email) == email.sender_email
    )
    stakeholder = (await session.exec(stmt)).first()
    submitter_name = stakeholder.name if stakeholder else email.sender_name

    enquiry = Enquiry(
        project_id=project.id,
        submitter_name=submitter_name,
        submitter_email=email.sender_email,
        submitter_org=stakeholder.organization if stakeholder else None,
        subject=email.subject,
        message=email.body,
        category="email",
        priority=EnquiryPriority.normal.value,
        status=EnquiryStatus.new.value,
        gdpr_consent=False,
    )
    session.add(enquiry)
    await session.flush()
    session.add(
        EnquiryMessage(
            enquiry_id=enquiry.id,
            type=MessageType.inbound.value,
            content=email.body,
            author_name=submitter_name,
        )
    )
    await session.commit()
    await session.refresh(enquiry)
    logger.info(f"Created enquiry {enquiry.id} for project '{project.name}' from {email.sender_email}")

    auto_reply_sent = False
    if project.auto_reply_enabled and project.auto_reply_subject and project.auto_reply_message:
        message = auto_reply_email(
            sender=email_client.sender(project.email_from_name, project.email_from_address),
            to=email.sender_email,
            subject_template=project.auto_reply_subject,
            message_template=project.auto_reply_message,
            name=submitter_name,
            subject=email.subject,
            project_name=project.name,
            reply_to=project.email_from_address,
        )
        if await send_quietly(email_client, message):
            auto_reply_sent = True
            session.add(
                EnquiryMessage(
                    enquiry_id=enquiry.id,
                    type=MessageType.outbound.value,
                    content=fill_placeholders(
                        project.auto_reply_message, name=submitter_name, subject=email.subject, project=project.name
                    ),
                    author_name=AUTO_REPLY_AUTHOR,
                )
            )
            await session.commit()
            logger.info(f"Auto-reply sent to {email.sender_email} for enquiry {enquiry.id}")

    return InboundEmailResponse(
        success=True,
        enquiry_id=enquiry.id,
        project_id=project.id,
        project_name=project.name,
        from_stakeholder=stakeholder is not None,
        auto_reply_sent=auto_reply_sent,
    )
