"""
Unit tests for the mailing list, outbound email and inbound email webhook endpoints.
"""

from unittest.mock import patch

import pytest
from sqlmodel import select

from placemaker_ai.core.database.entities import Enquiry, Stakeholder, StakeholderEngagement
from placemaker_ai.server.core.config import settings

pytestmark = pytest.mark.asyncio

PROJECTS = "/api/v1/projects"
WEBHOOK = "/api/v1/webhooks/email"

INBOUND = {
    "type": "email.received",
    "data": {
        "from": "Sam Resident <sam@example.org>",
        "to": ["consult@example.com"],
        "subject": "Parking on Mill Lane",
        "text": "Will the scheme remove parking?",
    },
}


async def add_stakeholder(session, project, email):
    stakeholder = Stakeholder(project_id=project.id, name="Mill Lane RA", email=email)
    session.add(stakeholder)
    await session.commit()
    return stakeholder


class TestInboundWebhook:
    async def test_health(self, client):
        response = await client.get(WEBHOOK)
        data = response.json()
        assert data["status"] == "ok"
        assert data["service"] == "inbound-email-webhook"

    async def test_files_enquiry(self, client, session, project):
        response = await client.post(WEBHOOK, json=INBOUND)

        assert response.status_code == 200
        data = response.json()
        assert data["project_id"] == project.id
        assert data["project_name"] == "Riverside Regeneration"
        assert data["from_stakeholder"] is False
        assert "warning" not in data
        enquiry = await session.get(Enquiry, data["enquiry_id"])
        assert enquiry.submitter_name == "Sam Resident"
        assert enquiry.category == "email"

    async def test_no_matching_project(self, client, project):
        payload = {"from": "sam@example.org", "to": "hello@elsewhere.net", "subject": "Hi"}
        response = await client.post(WEBHOOK, json=payload)
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "warning": "No matching project found",
            "recipients": ["hello@elsewhere.net"],
            "from_stakeholder": False,
            "auto_reply_sent": False,
        }

    async def test_missing_fields(self, client):
        response = await client.post(WEBHOOK, json={"from": "sam@example.org"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing required fields: from, to, subject"

    async def test_secret_required(self, client, project):
        with patch.object(settings, "email_webhook_secret", "s3cret"):
            assert (await client.post(WEBHOOK, json=INBOUND)).status_code == 401
            wrong = await client.post(WEBHOOK, json=INBOUND, headers={"Authorization": "Bearer nope"})
            assert wrong.status_code == 401
            assert wrong.json()["detail"] == "Unauthorized"

            bearer = await client.post(WEBHOOK, json=INBOUND, headers={"Authorization": "Bearer s3cret"})
            assert bearer.status_code == 200
            signed = await client.post(WEBHOOK, json=INBOUND, headers={"svix-id": "msg_2abc"})
            assert signed.status_code == 200


class TestSubscribers:
    async def test_add_unsubscribe_and_delete(self, client, admin_headers, project):
        url = f"{PROJECTS}/{project.id}/subscribers"

        response = await client.post(url, headers=admin_headers, json={"email": "Ann@Example.org", "name": "Ann"})
        assert response.status_code == 201
        ann = response.json()
        assert ann["email"] == "ann@example.org"
        assert ann["source"] == "manual"
        assert ann["subscribed"] is True

        again = (await client.post(url, headers=admin_headers, json={"email": "ann@example.org"})).json()
        assert again["id"] == ann["id"]
        assert again["name"] == "Ann"

        response = await client.delete(url, headers=admin_headers, params={"email": "ann@example.org"})
        assert response.status_code == 200
        assert response.json()["subscribed"] is False
        assert response.json()["unsubscribed_at"] is not None

        resubscribed = (await client.post(url, headers=admin_headers, json={"email": "ann@example.org"})).json()
        assert resubscribed["id"] == ann["id"]
        assert resubscribed["subscribed"] is True

        assert [s["email"] for s in (await client.get(url, headers=admin_headers)).json()] == ["ann@example.org"]

        assert (await client.delete(f"{url}/{ann['id']}", headers=admin_headers)).status_code == 204
        response = await client.delete(f"{url}/{ann['id']}", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == f"Subscriber {ann['id']} not found"

    async def test_unsubscribe_unknown(self, client, admin_headers, project):
        response = await client.delete(
            f"{PROJECTS}/{project.id}/subscribers", headers=admin_headers, params={"email": "nobody@example.org"}
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "Subscriber nobody@example.org not found"


class TestBroadcast:
    async def test_broadcast(self, client, session, admin_headers, project, outbox):
        subscribers = f"{PROJECTS}/{project.id}/subscribers"
        for address in ("ann@example.org", "chair@mill.org"):
            await client.post(subscribers, headers=admin_headers, json={"email": address})
        stakeholder = await add_stakeholder(session, project, "Chair@Mill.org")

        response = await client.post(
            f"{PROJECTS}/{project.id}/emails",
            headers=admin_headers,
            json={"subject": "Exhibition dates", "body": "Join us on Saturday.", "sent_by": "Tom"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["recipients"] == 2
        assert data["email_sent"] is True
        assert data["stakeholder_engagements_logged"] == 1
        assert data["project_email"]["recipient_count"] == 2
        assert data["project_email"]["sent_by"] == "Tom"

        [message] = outbox.messages
        assert sorted(message["to"]) == ["ann@example.org", "chair@mill.org"]
        assert message["from"] == "Riverside Team <riverside@example.com>"

        [engagement] = (
            await session.exec(
                select(StakeholderEngagement).where(StakeholderEngagement.stakeholder_id == stakeholder.id)
            )
        ).all()
        assert engagement.type == "outbound_email"
        assert engagement.title == "Email sent: Exhibition dates"
        assert engagement.outcome == "Sent as part of mailing list broadcast to 2 recipients"

        history = (await client.get(f"{PROJECTS}/{project.id}/emails", headers=admin_headers)).json()
        assert [e["subject"] for e in history] == ["Exhibition dates"]

    async def test_no_subscribers(self, client, admin_headers, project, outbox):
        response = await client.post(
            f"{PROJECTS}/{project.id}/emails", headers=admin_headers, json={"subject": "Hi", "body": "Hello"}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "No subscribers to send to"
        assert outbox.messages == []

    async def test_provider_failure_still_recorded(self, client, admin_headers, project, outbox):
        await client.post(f"{PROJECTS}/{project.id}/subscribers", headers=admin_headers, json={"email": "a@b.org"})
        outbox.fail_with = 422
        response = await client.post(
            f"{PROJECTS}/{project.id}/emails", headers=admin_headers, json={"subject": "Hi", "body": "Hello"}
        )
        assert response.status_code == 201
        assert response.json()["email_sent"] is False


class TestDirectSend:
    async def test_send(self, client, session, admin_headers, project, outbox):
        await add_stakeholder(session, project, "chair@mill.org")
        response = await client.post(
            f"{PROJECTS}/{project.id}/emails/send",
            headers=admin_headers,
            json={"to": ["chair@mill.org", " "], "subject": "Meeting", "message": "See you Tuesday."},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["email_id"] == "msg_1"
        assert data["recipient_count"] == 1
        assert data["stakeholder_engagements_logged"] == 1
        assert outbox.to("chair@mill.org")

        history = (await client.get(f"{PROJECTS}/{project.id}/emails", headers=admin_headers)).json()
        assert history[0]["id"] == data["project_email_id"]
        assert history[0]["sent_by"] == "System"

    async def test_fields_required(self, client, admin_headers, project):
        response = await client.post(
            f"{PROJECTS}/{project.id}/emails/send", headers=admin_headers, json={"to": [], "subject": "Hi"}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "to, subject, and message are required"

    async def test_not_configured(self, client, admin_headers, project, email_client):
        email_client.config.api_key = None
        response = await client.post(
            f"{PROJECTS}/{project.id}/emails/send",
            headers=admin_headers,
            json={"to": ["a@b.org"], "subject": "Hi", "message": "Hello"},
        )
        assert response.status_code == 500
        assert response.json()["detail"] == "Email sending not configured (RESEND_API_KEY missing)"

    async def test_provider_failure(self, client, admin_headers, project, outbox):
        outbox.fail_with = 422
        response = await client.post(
            f"{PROJECTS}/{project.id}/emails/send",
            headers=admin_headers,
            json={"to": ["a@b.org"], "subject": "Hi", "message": "Hello"},
        )
        assert response.status_code == 500
        assert (await client.get(f"{PROJECTS}/{project.id}/emails", headers=admin_headers)).json() == []
