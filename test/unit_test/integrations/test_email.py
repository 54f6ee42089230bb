"""Unit tests for the email client and message builders."""

from unittest.mock import patch

import httpx
import pytest

from placemaker_ai.integrations.email import EmailDeliveryError, OutgoingEmail, ResendClient, send_quietly, sender_address
from placemaker_ai.integrations.email.templates import (
    auto_reply_email,
    enquiry_response_email,
    excerpt,
    fill_placeholders,
    mailing_list_email,
    new_enquiry_email,
    query_email,
)
from placemaker_ai.server.core.config import EmailConfig


def _message() -> OutgoingEmail:
    return OutgoingEmail(from_="Team <team@example.com>", to=["a@example.com"], subject="Hello", html="<p>Hi</p>")


class TestSenderAddress:
    def test_project_address_with_name(self):
        assert sender_address("Riverside", "r@example.com") == "Riverside <r@example.com>"

    def test_project_address_without_name(self):
        assert sender_address(None, "r@example.com") == "Project Team <r@example.com>"

    def test_default_sender(self):
        assert sender_address("Riverside", None, "Default <d@example.com>") == "Default <d@example.com>"
        assert sender_address(None, None) == "Placemaker.ai <onboarding@resend.dev>"


@pytest.mark.asyncio
class TestResendClient:
    async def test_send_posts_payload(self, email_client, outbox):
        message = _message()
        message.reply_to = "reply@example.com"

        assert await email_client.send(message) == "msg_1"
        assert outbox.messages == [
            {
                "from": "Team <team@example.com>",
                "to": ["a@example.com"],
                "subject": "Hello",
                "html": "<p>Hi</p>",
                "reply_to": "reply@example.com",
            }
        ]

    async def test_unconfigured_client_skips(self):
        client = ResendClient(EmailConfig(api_key=None, api_url="http://mock-resend"))
        with patch("placemaker_ai.integrations.email.client.logger") as mock_logger:
            assert await client.send(_message()) is None
        mock_logger.info.assert_called_once()
        await client.aclose()

    async def test_rejection_raises(self, email_client, outbox):
        outbox.fail_with = 422
        with pytest.raises(EmailDeliveryError) as exc_info:
            await email_client.send(_message())
        assert exc_info.value.status_code == 422

    async def test_unreachable_provider(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = ResendClient(EmailConfig(api_key="k", api_url="http://mock-resend"), client=http)
            with pytest.raises(EmailDeliveryError, match="unreachable"):
                await client.send(_message())

    async def test_send_quietly_logs_failures(self, email_client, outbox):
        outbox.fail_with = 500
        with patch("placemaker_ai.integrations.email.client.logger") as mock_logger:
            assert await send_quietly(email_client, _message()) is None
        mock_logger.error.assert_called_once()

    async def test_sender_uses_config_default(self, email_client):
        assert email_client.sender(None, None) == "Placemaker.ai <noreply@example.com>"
        assert email_client.sender("Team", "t@example.com") == "Team <t@example.com>"


class TestTemplates:
    """Test the rendered message builders."""

    def test_excerpt(self):
        assert excerpt("abc", 5) == "abc"
        assert excerpt("abcdef", 3) == "abc..."

    def test_fill_placeholders_ignores_case_and_spacing(self):
        text = "Hi {{ Name }}, re {{subject}} for {{PROJECT}} {{other}}"
        assert fill_placeholders(text, name="Sam", subject="Trees", project="Riverside") == (
            "Hi Sam, re Trees for Riverside {{other}}"
        )

    def test_fill_placeholders_keeps_backslashes(self):
        assert fill_placeholders("{{name}}", name=r"C:\temp", subject="", project="") == r"C:\temp"

    def test_query_email(self):
        email = query_email(
            sender="Team <t@example.com>",
            to="tom@example.com",
            team_member_name="Tom",
            question="What is the height?",
            enquiry_subject="Height",
            enquiry_message="x" * 600,
            submitter_name="Sam",
            query_url="http://localhost/query/1?token=abc",
        )
        assert email.subject == "Information Request: Height"
        assert email.to == ["tom@example.com"]
        assert "What is the height?" in email.html
        assert "x" * 500 + "..." in email.html
        assert "http://localhost/query/1?token=abc" in email.html

    def test_new_enquiry_email_escapes_public_text(self):
        email = new_enquiry_email(
            sender="s@example.com",
            to=["a@example.com", "b@example.com"],
            project_name="Riverside",
            submitter_name="<script>alert(1)</script>",
            submitter_email="sam@example.com",
            subject="Trees",
            message="Please keep the oaks",
            category="environment",
            enquiry_url="http://localhost/projects/1?tab=enquiries&enquiry=2",
        )
        assert email.subject == "New Enquiry: Trees"
        assert email.to == ["a@example.com", "b@example.com"]
        assert "<script>" not in email.html
        assert "&lt;script&gt;" in email.html

    def test_mailing_list_email(self):
        email = mailing_list_email(
            sender="s@example.com", to=["a@example.com"], subject="Update", body="Works start Monday",
            project_name="Riverside",
        )
        assert email.subject == "Update"
        assert "Works start Monday" in email.html

    def test_enquiry_response_email(self):
        email = enquiry_response_email(
            sender="s@example.com", to="sam@example.com", submitter_name="Sam", subject="Trees",
            response="The oaks stay.", project_name="Riverside",
        )
        assert email.subject == "Re: Trees"
        assert email.to == ["sam@example.com"]
        assert "The oaks stay." in email.html

    def test_auto_reply_email(self):
        email = auto_reply_email(
            sender="s@example.com",
            to="sam@example.com",
            subject_template="Re: {{subject}}",
            message_template="Thanks {{name}}, the {{project}} team will reply soon.",
            name="Sam",
            subject="Trees",
            project_name="Riverside",
            reply_to="riverside@example.com",
        )
        assert email.subject == "Re: Trees"
        assert "Thanks Sam, the Riverside team will reply soon." in email.html
        assert email.to_payload()["reply_to"] == "riverside@example.com"
