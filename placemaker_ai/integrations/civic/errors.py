"""Error types raised by the civic-data client.

Catch ``CivicDataError`` for any failed lookup and inspect ``service``,
``status_code`` or ``details``.
"""

from __future__ import annotations

from typing import Any, Optional


class CivicDataError(Exception):
    """Failure talking to one of the civic-data APIs.

    Args:
        message: Human-readable error description.
        service: Short name of the API that failed (postcodes, parliament, mapit).
        status_code: Optional HTTP status code associated with the failure.
        details: Optional payload returned by the API.
    """

    def __init__(
        self,
        message: str,
        *,
        service: str,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.service = service
        self.status_code = status_code
        self.details = details
