"""
Feedback collection.

Gathers every analysable piece of feedback for a project: approved map
pins, feedback form responses and enquiries.
"""

from __future__ import annotations

from typing import Any, Dict, List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database.entities import Enquiry, FeedbackForm, FeedbackResponse, PublicPin

from .models import FeedbackItem

TEXT_FIELD_TYPES = ("text", "textarea")
EXTRA_TEXT_MIN_LENGTH = 10


def form_response_content(fields: List[Dict[str, Any]], data: Dict[str, Any]) -> str:
    """Flatten a form response into analysable text.

    Text and textarea answers are rendered as ``Label: value``, looked up by
    field id and then by label. String values longer than ten characters
    under keys that are neither a field id nor a label (answers posted by
    external forms) are appended the same way. Parts are joined with ". ".
    """
    parts = []
    for field in fields:
        if field.get("type") not in TEXT_FIELD_TYPES:
            continue
        value = data.get(field.get("id")) or data.get(field.get("label"))
        if value and isinstance(value, str):
            parts.append(f"{field.get('label')}: {value}")
    known = {f.get("id") for f in fields} | {f.get("label") for f in fields}
    for key, value in data.items():
        if key in known:
            continue
        if isinstance(value, str) and len(value) > EXTRA_TEXT_MIN_LENGTH:
            parts.append(f"{key}: {value}")
    return ". ".join(parts)


async def collect_feedback(session: AsyncSession, project_id: int) -> List[FeedbackItem]:
    """All feedback for a project: approved pins, non-empty form responses, then enquiries."""
    items: List[FeedbackItem] = []

    pins = await session.exec(
        select(PublicPin)
        .where(PublicPin.project_id == project_id, PublicPin.approved == True)  # noqa: E712
        .order_by(PublicPin.created_at.desc(), PublicPin.id.desc())  # type: ignore
    )
    for pin in pins.all():
        items.append(
            FeedbackItem(
                id=f"pin-{pin.id}",
                type="pin",
                content=pin.comment,
                category=pin.category,
                latitude=pin.latitude,
                longitude=pin.longitude,
                created_at=pin.created_at,
            )
        )

    rows = await session.exec(
        select(FeedbackResponse, FeedbackForm)
        .join(FeedbackForm, FeedbackResponse.form_id == FeedbackForm.id)
        .where(FeedbackForm.project_id == project_id)
        .order_by(FeedbackResponse.id)
    )
    for response, form in rows.all():
        content = form_response_content(form.fields or [], response.data or {})
        if content:
            items.append(
                FeedbackItem(id=f"form-{response.id}", type="form", content=content, created_at=response.submitted_at)
            )

    enquiries = await session.exec(
        select(Enquiry)
        .where(Enquiry.project_id == project_id)
        .order_by(Enquiry.created_at.desc(), Enquiry.id.desc())  # type: ignore
    )
    for enquiry in enquiries.all():
        items.append(
            FeedbackItem(
                id=f"enquiry-{enquiry.id}",
                type="enquiry",
                content=f"{enquiry.subject}: {enquiry.message}",
                category=enquiry.category,
                created_at=enquiry.created_at,
            )
        )
    return items
