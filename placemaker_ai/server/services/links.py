"""Absolute links placed in outgoing email."""

from fastapi import Request

from placemaker_ai.server.core.config import settings


def public_base_url(request: Request) -> str:
    """``PUBLIC_BASE_URL`` when configured, else the base URL the request arrived on."""
    return (settings.public_base_url or str(request.base_url)).rstrip("/")


def query_link(request: Request, query_id: int, token: str) -> str:
    return f"{public_base_url(request)}/queries/{query_id}?token={token}"


def enquiry_link(request: Request, project_id: int, enquiry_id: int) -> str:
    return f"{public_base_url(request)}/projects/{project_id}?tab=enquiries&enquiry={enquiry_id}"
