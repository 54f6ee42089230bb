"""
Service Dependencies.

Provides the external-service clients and the feedback analyser to API
endpoints. Tests replace them through ``app.dependency_overrides``.
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends

from placemaker_ai.analytics import FeedbackAnalyzer
from placemaker_ai.integrations.civic import CivicDataClient
from placemaker_ai.integrations.email import ResendClient


async def get_civic_client() -> AsyncGenerator[CivicDataClient, None]:
    async with CivicDataClient.from_settings() as client:
        yield client


async def get_email_client() -> AsyncGenerator[ResendClient, None]:
    async with ResendClient.from_settings() as client:
        yield client


def get_feedback_analyzer() -> FeedbackAnalyzer:
    return FeedbackAnalyzer.from_settings()


CivicClientDep = Annotated[CivicDataClient, Depends(get_civic_client)]
EmailClientDep = Annotated[ResendClient, Depends(get_email_client)]
AnalyzerDep = Annotated[FeedbackAnalyzer, Depends(get_feedback_analyzer)]
