"""Transactional email client

Thin async client for the Resend HTTP API (``POST /emails``). The platform
only ever sends; delivery, retries and bounces stay with the provider.

When no API key is configured every send is skipped and returns ``None`` so
that local and test environments work without credentials.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

import httpx

from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.server.core.config import EmailConfig, settings

from .errors import EmailDeliveryError

logger = get_logger(__name__)

FALLBACK_FROM = "Placemaker.ai <onboarding@resend.dev>"


@dataclass
class OutgoingEmail:
    """A rendered message ready to hand to the provider."""

    from_: str
    to: List[str]
    subject: str
    html: str
    reply_to: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"from": self.from_, "to": self.to, "subject": self.subject, "html": self.html}
        if self.reply_to:
            payload["reply_to"] = self.reply_to
        return payload


def sender_address(
    from_name: Optional[str], from_address: Optional[str], default_from: Optional[str] = None
) -> str:
    """Sender header for project email.

    Uses the project's own address when it has one, named after the project
    sender name or "Project Team"; otherwise the configured default sender.
    """
    if from_address:
        return f"{from_name or 'Project Team'} <{from_address}>"
    return default_from or FALLBACK_FROM


class ResendClient:
    """Async client for the Resend email API."""

    def __init__(self, config: EmailConfig, *, client: Optional[httpx.AsyncClient] = None) -> None:
        self.config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=15.0)

    @classmethod
    def from_settings(cls, client: Optional[httpx.AsyncClient] = None) -> "ResendClient":
        return cls(settings.email, client=client)

    @property
    def configured(self) -> bool:
        return bool(self.config.api_key)

    def sender(self, from_name: Optional[str], from_address: Optional[str]) -> str:
        return sender_address(from_name, from_address, self.config.default_from)

    async def __aenter__(self) -> "ResendClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def send(self, email: OutgoingEmail) -> Optional[str]:
        """Send one message.

        API
        ---
        - Method/Path: ``POST {api_url}/emails``
        - Auth: ``Authorization: Bearer {api_key}``

        Returns:
            The provider's message id, or ``None`` when sending is not configured.

        Raises:
            EmailDeliveryError: When the provider cannot be reached or rejects the message.
        """
        if not self.configured:
            logger.info("RESEND_API_KEY not configured, skipping email")
            return None
        try:
            r = await self._client.post(
                f"{self.config.api_url.rstrip('/')}/emails",
                json=email.to_payload(),
                headers={"Authorization": f"Bearer {self.config.api_key}"},
            )
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise EmailDeliveryError(
                f"Email provider rejected message: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise EmailDeliveryError(f"Email provider unreachable: {e}") from e
        message_id = (r.json() or {}).get("id")
        logger.debug(f"Sent email '{email.subject}' to {len(email.to)} recipient(s): id={message_id}")
        return message_id


async def send_quietly(client: ResendClient, email: OutgoingEmail) -> Optional[str]:
    """Send and log any delivery failure instead of raising it.

    Returns:
        The provider's message id, or ``None`` when skipped or failed.
    """
    try:
        return await client.send(email)
    except EmailDeliveryError as e:
        logger.error(f"Email send failed ({e.status_code}): {e} details={e.details}")
        return None


def recipients(to: str | Sequence[str]) -> List[str]:
    return [to] if isinstance(to, str) else list(to)
