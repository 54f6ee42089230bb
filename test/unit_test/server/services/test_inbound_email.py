"""Unit tests for inbound email handling."""

import pytest
from sqlmodel import select

from placemaker_ai.core.database.entities import Enquiry, EnquiryMessage, Project, Stakeholder
from placemaker_ai.server.services.inbound_email import (
    InboundEmailError,
    ParsedInboundEmail,
    match_project,
    parse_payload,
    parse_sender,
    receive_inbound_email,
)


def _email(**overrides) -> ParsedInboundEmail:
    values = dict(
        sender_email="resident@example.org",
        sender_name="resident",
        recipients=["hello@example.com"],
        subject="Parking on Mill Lane",
        body="Will the new scheme remove parking?",
    )
    values.update(overrides)
    return ParsedInboundEmail(**values)


class TestParseSender:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Sam Resident <Sam@Example.org>", ("sam@example.org", "Sam Resident")),
            ('"Sam Resident" <sam@example.org>', ("sam@example.org", "Sam Resident")),
            ("<sam@example.org>", ("sam@example.org", None)),
            ("SAM@example.org", ("sam@example.org", None)),
        ],
    )
    def test_parse_sender(self, raw, expected):
        assert parse_sender(raw) == expected


class TestParsePayload:
    def test_provider_event(self):
        parsed = parse_payload(
            {
                "type": "email.received",
                "data": {"from": "Sam <sam@example.org>", "to": ["hello@example.com"], "html": "<p>Hi</p>"},
            }
        )
        assert parsed.sender_email == "sam@example.org"
        assert parsed.sender_name == "Sam"
        assert parsed.recipients == ["hello@example.com"]
        assert parsed.subject == "(No Subject)"
        assert parsed.body == "<p>Hi</p>"

    def test_provider_event_without_body(self):
        parsed = parse_payload({"type": "email.received", "data": {"from": "sam@example.org", "subject": "Hi"}})
        assert parsed.sender_name == "sam"
        assert parsed.body == "(No message body)"

    def test_generic_shape(self):
        parsed = parse_payload(
            {
                "from": "sam@example.org",
                "fromName": "Sam Resident",
                "to": "hello@example.com",
                "subject": "Question",
                "text": "Plain text",
                "html": "<p>ignored</p>",
            }
        )
        assert parsed.sender_name == "Sam Resident"
        assert parsed.recipients == ["hello@example.com"]
        assert parsed.body == "Plain text"

    def test_generic_shape_recipient_list(self):
        parsed = parse_payload({"from": "sam@example.org", "to": ["a@x.com", "b@y.com"], "subject": "Q"})
        assert parsed.recipients == ["a@x.com", "b@y.com"]

    @pytest.mark.parametrize(
        "payload",
        [
            {"to": "hello@example.com", "subject": "Q"},
            {"from": "sam@example.org", "subject": "Q"},
            {"from": "sam@example.org", "to": "hello@example.com"},
        ],
    )
    def test_generic_shape_missing_fields(self, payload):
        with pytest.raises(InboundEmailError, match="Missing required fields: from, to, subject"):
            parse_payload(payload)


@pytest.mark.asyncio
class TestMatchProject:
    async def test_matches_domain(self, session, project):
        assert (await match_project(session, ["Hello <Hello@Example.com>"])).id == project.id

    async def test_matches_exact_address(self, session):
        other = Project(name="Other", email_from_address="consult@other.org")
        session.add(other)
        await session.commit()
        assert (await match_project(session, ["nobody@elsewhere.net", "consult@other.org"])).id == other.id

    async def test_no_match(self, session, project):
        assert await match_project(session, ["someone@unknown.net", "not-an-address"]) is None

    async def test_wildcard_domain_matches_literally(self, session, project):
        assert await match_project(session, ["anyone@%", "x@exa_ple.com"]) is None


@pytest.mark.asyncio
class TestReceiveInboundEmail:
    async def test_creates_enquiry(self, session, project, email_client, outbox):
        response = await receive_inbound_email(session, email_client, _email())

        assert response.success is True
        assert response.project_id == project.id
        assert response.from_stakeholder is False
        assert response.auto_reply_sent is False
        enquiry = await session.get(Enquiry, response.enquiry_id)
        assert enquiry.category == "email"
        assert enquiry.submitter_name == "resident"
        assert enquiry.gdpr_consent is False
        messages = (await session.exec(select(EnquiryMessage))).all()
        assert [(m.type, m.content) for m in messages] == [("inbound", "Will the new scheme remove parking?")]
        assert outbox.messages == []

    async def test_known_stakeholder_and_auto_reply(self, session, project, email_client, outbox):
        project.auto_reply_enabled = True
        project.auto_reply_subject = "Re: {{subject}}"
        project.auto_reply_message = "Thanks {{name}}, the {{project}} team will reply soon."
        session.add(project)
        session.add(
            Stakeholder(project_id=project.id, name="Sam Resident", organization="Mill Lane RA",
                        email="Resident@Example.org")
        )
        await session.commit()

        response = await receive_inbound_email(session, email_client, _email())

        assert response.from_stakeholder is True
        assert response.auto_reply_sent is True
        enquiry = await session.get(Enquiry, response.enquiry_id)
        assert enquiry.submitter_name == "Sam Resident"
        assert enquiry.submitter_org == "Mill Lane RA"
        [sent] = outbox.to("resident@example.org")
        assert sent["subject"] == "Re: Parking on Mill Lane"
        assert sent["from"] == "Riverside Team <riverside@example.com>"
        assert sent["reply_to"] == "riverside@example.com"
        outbound = (
            await session.exec(select(EnquiryMessage).where(EnquiryMessage.type == "outbound"))
        ).one()
        assert outbound.author_name == "Auto-Reply"
        assert outbound.content == "Thanks Sam Resident, the Riverside Regeneration team will reply soon."

    async def test_failed_auto_reply_is_not_recorded(self, session, project, email_client, outbox):
        project.auto_reply_enabled = True
        project.auto_reply_subject = "Thanks"
        project.auto_reply_message = "Received"
        session.add(project)
        await session.commit()
        outbox.fail_with = 500

        response = await receive_inbound_email(session, email_client, _email())

        assert response.auto_reply_sent is False
        messages = (await session.exec(select(EnquiryMessage))).all()
        assert [m.type for m in messages] == ["inbound"]

    async def test_no_matching_project(self, session, email_client):
        response = await receive_inbound_email(session, email_client, _email(recipients=["x@nowhere.net"]))

        assert response.success is True
        assert response.warning == "No matching project found"
        assert response.recipients == ["x@nowhere.net"]
        assert (await session.exec(select(Enquiry))).all() == []
