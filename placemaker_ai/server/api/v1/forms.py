"""
API endpoints for feedback forms.

Project routes let the team build questionnaires and read the responses.
Public routes serve a form and accept submissions; a respondent who gives
mailing consent and an email address is added to the mailing list.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database import get_session, utc_now
from placemaker_ai.core.database.entities import FeedbackForm, FeedbackResponse
from placemaker_ai.core.database.repositories import SubscriberRepository
from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.core.models.domain import SubscriberSource
from placemaker_ai.core.models.io.feedback import (
    FeedbackFormCreate,
    FeedbackFormDetailRead,
    FeedbackFormRead,
    FeedbackResponseRead,
    FeedbackResponseSubmit,
)
from placemaker_ai.server.auth import ProjectDep

logger = get_logger(__name__)

router = APIRouter(tags=["forms"])
public_router = APIRouter(tags=["forms"])


def respondent_contact(fields: List[Dict[str, Any]], data: Dict[str, Any]) -> Tuple[Optional[str], Optional[str]]:
    """Find the respondent's (email, name) in a form submission.

    Email comes from an email-typed field or one whose label mentions email;
    name from a field whose label mentions name (but not email). Answers are
    looked up by field id, then by label. Raw ``email`` and ``name`` keys are
    the fallback for submissions from external forms.
    """
    email: Optional[str] = None
    name: Optional[str] = None
    for field in fields:
        label = str(field.get("label", ""))
        value = data.get(field.get("id")) or data.get(label)
        if not value or not isinstance(value, str):
            continue
        lowered = label.lower()
        if field.get("type") == "email" or "email" in lowered:
            email = value.lower()
        if "name" in lowered and "email" not in lowered:
            name = value

    for key, value in data.items():
        if not value or not isinstance(value, str):
            continue
        if key.lower() == "email" and not email:
            email = value.lower()
        if key.lower() == "name" and not name:
            name = value
    return email, name


async def _get_project_form(session: AsyncSession, project_id: int, form_id: int) -> FeedbackForm:
    form = await session.get(FeedbackForm, form_id)
    if not form or form.project_id != project_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Form {form_id} not found")
    return form


@router.get(
    "/{project_id}/forms",
    response_model=List[FeedbackFormRead],
    summary="List Forms",
    description="List the project's feedback forms, newest first.",
    response_description="A list of forms.",
)
async def list_forms(ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> List[FeedbackFormRead]:
    statement = (
        select(FeedbackForm)
        .where(FeedbackForm.project_id == ctx.project_id)
        .order_by(FeedbackForm.created_at.desc(), FeedbackForm.id.desc())
    )
    result = await session.exec(statement)
    return [FeedbackFormRead.model_validate(f) for f in result.all()]


@router.post(
    "/{project_id}/forms",
    response_model=FeedbackFormRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Form",
    description="Create a feedback form from a list of field definitions.",
    response_description="The created form.",
)
async def create_form(
    data: FeedbackFormCreate, ctx: ProjectDep, session: AsyncSession = Depends(get_session)
) -> FeedbackFormRead:
    """
    Create a form.

    - **name**: Form title.
    - **fields**: Questions, each with an id, label, type and optional options.
    - **active**: Whether the form accepts responses.
    """
    form = FeedbackForm(
        project_id=ctx.project_id,
        name=data.name,
        fields=[f.model_dump(exclude_none=True) for f in data.fields],
        active=data.active,
    )
    session.add(form)
    await session.commit()
    await session.refresh(form)
    return FeedbackFormRead.model_validate(form)


@router.get(
    "/{project_id}/forms/{form_id}",
    response_model=FeedbackFormDetailRead,
    summary="Get Form",
    description="Retrieve a form with its responses, newest first.",
    response_description="The form with responses.",
    responses={404: {"description": "Form not found in this project"}},
)
async def get_form(form_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> FeedbackFormDetailRead:
    form = await _get_project_form(session, ctx.project_id, form_id)
    statement = (
        select(FeedbackResponse)
        .where(FeedbackResponse.form_id == form.id)
        .order_by(FeedbackResponse.submitted_at.desc(), FeedbackResponse.id.desc())
    )
    responses = (await session.exec(statement)).all()
    return FeedbackFormDetailRead(
        **FeedbackFormRead.model_validate(form).model_dump(),
        responses=[FeedbackResponseRead.model_validate(r) for r in responses],
    )


@router.delete(
    "/{project_id}/forms/{form_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Form",
    description="Delete a form and all of its responses.",
    responses={404: {"description": "Form not found in this project"}},
)
async def delete_form(form_id: int, ctx: ProjectDep, session: AsyncSession = Depends(get_session)) -> None:
    form = await _get_project_form(session, ctx.project_id, form_id)
    await session.delete(form)
    await session.commit()


@public_router.get(
    "/{form_id}",
    response_model=FeedbackFormRead,
    summary="Get Public Form",
    description="Retrieve a form for display to respondents.",
    response_description="The form definition.",
    responses={404: {"description": "Form not found"}},
)
async def get_public_form(form_id: int, session: AsyncSession = Depends(get_session)) -> FeedbackFormRead:
    form = await session.get(FeedbackForm, form_id)
    if not form:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return FeedbackFormRead.model_validate(form)


@public_router.post(
    "/{form_id}/responses",
    response_model=FeedbackResponseRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Form Response",
    description="Submit answers to a form. GDPR consent is required.",
    response_description="The stored response.",
    responses={
        400: {"description": "GDPR consent missing"},
        404: {"description": "Form not found"},
    },
)
async def submit_form_response(
    form_id: int, data: FeedbackResponseSubmit, session: AsyncSession = Depends(get_session)
) -> FeedbackResponseRead:
    """
    Submit a response.

    - **data**: Answers keyed by field id.
    - **gdpr_consent**: Must be true.
    - **mailing_consent**: Adds the respondent to the mailing list when an email is present.
    """
    if not data.gdpr_consent:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="GDPR consent is required")
    form = await session.get(FeedbackForm, form_id)
    if not form:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    response = FeedbackResponse(
        form_id=form.id,
        data=data.data,
        gdpr_consent=True,
        gdpr_consent_date=utc_now(),
        mailing_consent=data.mailing_consent,
    )
    session.add(response)
    await session.commit()
    await session.refresh(response)

    email, name = respondent_contact(form.fields, data.data)
    if email and data.mailing_consent:
        await SubscriberRepository(session).subscribe(
            form.project_id,
            email,
            name=name,
            source=SubscriberSource.feedback_form.value,
            source_id=response.id,
        )
        logger.debug(f"Subscribed form respondent to project {form.project_id}")
    return FeedbackResponseRead.model_validate(response)
