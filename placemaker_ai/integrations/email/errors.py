"""Error types raised by the email provider client."""

from __future__ import annotations

from typing import Any, Optional


class EmailDeliveryError(Exception):
    """The email provider rejected or failed a send.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code returned by the provider.
        details: Optional error payload returned by the provider.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details
