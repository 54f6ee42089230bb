"""
Email message builders.

Each builder renders one of the HTML templates shipped in ``templates/``
and returns a ready-to-send ``OutgoingEmail``. Templates autoescape, so any
text supplied by the public or by the project team is HTML-escaped.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from jinja2 import Environment, PackageLoader, select_autoescape

from .client import OutgoingEmail, recipients

_env = Environment(
    loader=PackageLoader("placemaker_ai.integrations.email", "templates"),
    autoescape=select_autoescape(["html"]),
)

_PLACEHOLDERS = {
    "name": re.compile(r"\{\{\s*name\s*\}\}", re.IGNORECASE),
    "subject": re.compile(r"\{\{\s*subject\s*\}\}", re.IGNORECASE),
    "project": re.compile(r"\{\{\s*project\s*\}\}", re.IGNORECASE),
}


def excerpt(text: str, limit: int) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def fill_placeholders(template: str, *, name: str, subject: str, project: str) -> str:
    """Substitute ``{{name}}``, ``{{subject}}`` and ``{{project}}`` in auto-reply text, ignoring case."""
    values = {"name": name, "subject": subject, "project": project}
    for key, pattern in _PLACEHOLDERS.items():
        template = pattern.sub(lambda _m, v=values[key]: v, template)
    return template


def _render(template: str, **context) -> str:
    return _env.get_template(template).render(**context)


def query_email(
    *,
    sender: str,
    to: str,
    team_member_name: str,
    question: str,
    enquiry_subject: str,
    enquiry_message: str,
    submitter_name: str,
    query_url: str,
) -> OutgoingEmail:
    """Ask a team member for input on an enquiry."""
    return OutgoingEmail(
        from_=sender,
        to=[to],
        subject=f"Information Request: {enquiry_subject}",
        html=_render(
            "query.html",
            team_member_name=team_member_name,
            question=question,
            enquiry_subject=enquiry_subject,
            enquiry_excerpt=excerpt(enquiry_message, 500),
            submitter_name=submitter_name,
            query_url=query_url,
        ),
    )


def new_enquiry_email(
    *,
    sender: str,
    to: str | Sequence[str],
    project_name: str,
    submitter_name: str,
    submitter_email: str,
    subject: str,
    message: str,
    category: str,
    enquiry_url: str,
) -> OutgoingEmail:
    """Notify the project team that an enquiry arrived."""
    return OutgoingEmail(
        from_=sender,
        to=recipients(to),
        subject=f"New Enquiry: {subject}",
        html=_render(
            "new_enquiry.html",
            project_name=project_name,
            submitter_name=submitter_name,
            submitter_email=submitter_email,
            subject=subject,
            message_excerpt=excerpt(message, 1000),
            category=category,
            enquiry_url=enquiry_url,
        ),
    )


def mailing_list_email(
    *, sender: str, to: Sequence[str], subject: str, body: str, project_name: str
) -> OutgoingEmail:
    return OutgoingEmail(
        from_=sender,
        to=list(to),
        subject=subject,
        html=_render("mailing_list.html", body=body, project_name=project_name),
    )


def enquiry_response_email(
    *, sender: str, to: str, submitter_name: str, subject: str, response: str, project_name: str
) -> OutgoingEmail:
    return OutgoingEmail(
        from_=sender,
        to=[to],
        subject=f"Re: {subject}",
        html=_render(
            "enquiry_response.html",
            submitter_name=submitter_name,
            subject=subject,
            response=response,
            project_name=project_name,
        ),
    )


def auto_reply_email(
    *,
    sender: str,
    to: str,
    subject_template: str,
    message_template: str,
    name: str,
    subject: str,
    project_name: str,
    reply_to: Optional[str] = None,
) -> OutgoingEmail:
    """Acknowledge inbound email using the project's auto-reply templates."""
    fill = dict(name=name, subject=subject, project=project_name)
    return OutgoingEmail(
        from_=sender,
        to=[to],
        subject=fill_placeholders(subject_template, **fill),
        html=_render(
            "auto_reply.html",
            message=fill_placeholders(message_template, **fill),
            project_name=project_name,
        ),
        reply_to=reply_to,
    )
