"""UK civic-data API client

Overview
--------
Thin async HTTP client over three public, keyless APIs:

- postcodes.io reverse geocoding: nearest postcode to a point
- UK Parliament members API: current MP for a postcode
- MapIt (mySociety): administrative areas containing a point

Each method returns typed DTOs or ``None`` when the API has no answer.
Transport failures and non-2xx responses are raised as ``CivicDataError``;
callers that chain lookups decide whether to continue.

Usage
-----
>>> async with CivicDataClient.from_settings() as client:
...     postcode = await client.postcode_for_point(51.5014, -0.1419)
"""

from __future__ import annotations

from typing import Any, List, Optional

import httpx

from placemaker_ai.core.logging_config import get_logger
from placemaker_ai.server.core.config import CivicDataConfig, settings

from .errors import CivicDataError
from .models import MAPIT_AREA_TYPES, AreaLookup, MapItArea, MemberDTO

logger = get_logger(__name__)


class CivicDataClient:
    """Async client for postcodes.io, the Parliament members API and MapIt."""

    def __init__(self, config: CivicDataConfig, *, client: Optional[httpx.AsyncClient] = None) -> None:
        """Create a civic-data client.

        Args:
            config: Base URLs and timeout.
            client: Optional preconfigured ``httpx.AsyncClient``. When omitted the
                client owns and closes its own connection pool.
        """
        self.config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.timeout, follow_redirects=True)

    @classmethod
    def from_settings(cls, client: Optional[httpx.AsyncClient] = None) -> "CivicDataClient":
        return cls(settings.civic, client=client)

    async def __aenter__(self) -> "CivicDataClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get_json(self, service: str, url: str, params: Optional[dict] = None) -> Any:
        try:
            r = await self._client.get(url, params=params)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise CivicDataError(
                f"{service} lookup failed: {e.response.status_code}",
                service=service,
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise CivicDataError(f"{service} lookup failed: {e}", service=service) from e
        try:
            return r.json()
        except ValueError as e:
            raise CivicDataError(f"{service} returned invalid JSON", service=service, details=r.text) from e

    async def postcode_for_point(self, latitude: float, longitude: float) -> Optional[str]:
        """Nearest postcode to a point.

        API
        ---
        - Method/Path: ``GET {postcodes_url}/postcodes?lon=&lat=&limit=1``

        Returns:
            The postcode, or ``None`` when the point is outside postcode coverage.
        """
        data = await self._get_json(
            "postcodes",
            f"{self.config.postcodes_url.rstrip('/')}/postcodes",
            params={"lon": longitude, "lat": latitude, "limit": 1},
        )
        results = (data or {}).get("result") or []
        if not results:
            return None
        postcode = results[0].get("postcode")
        logger.debug(f"Postcode for ({latitude}, {longitude}): {postcode}")
        return postcode

    async def current_mp_for_postcode(self, postcode: str) -> Optional[MemberDTO]:
        """Current Member of Parliament for the constituency containing ``postcode``.

        API
        ---
        - Method/Path: ``GET {parliament_url}/api/Members/Search``
        - Query: ``Location``, ``IsCurrentMember=true``, ``skip=0``, ``take=1``
        """
        data = await self._get_json(
            "parliament",
            f"{self.config.parliament_url.rstrip('/')}/api/Members/Search",
            params={"Location": postcode, "IsCurrentMember": "true", "skip": 0, "take": 1},
        )
        items = (data or {}).get("items") or []
        if not items:
            return None
        return MemberDTO.model_validate(items[0].get("value") or {})

    async def areas_for_point(self, latitude: float, longitude: float) -> List[MapItArea]:
        """Administrative areas containing a point, in response order.

        API
        ---
        - Method/Path: ``GET {mapit_url}/point/4326/{lon},{lat}?type=...``
        """
        data = await self._get_json(
            "mapit",
            f"{self.config.mapit_url.rstrip('/')}/point/4326/{longitude},{latitude}",
            params={"type": ",".join(MAPIT_AREA_TYPES)},
        )
        if not isinstance(data, dict):
            return []
        return [MapItArea.model_validate(area) for area in data.values()]

    async def area_lookup(self, latitude: float, longitude: float) -> AreaLookup:
        return AreaLookup.from_areas(await self.areas_for_point(latitude, longitude))
