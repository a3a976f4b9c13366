"""
Google Geocoding client with rate limiting using aiolimiter.
"""
from typing import Any, Dict, Optional

from aiohttp import ClientSession, ClientTimeout
from aiolimiter import AsyncLimiter
from loguru import logger

from skillbridge.config import CONCURRENCY, GEOCODE_URL, GOOGLE_MAPS_API_KEY
from skillbridge.models import Coordinates


class GeocodingClient:
    """
    Resolves addresses and postcodes to coordinates through the Google Geocoding API.
    """

    def __init__(self, api_key: Optional[str] = None, base_url: str = GEOCODE_URL):
        self.api_key = api_key if api_key is not None else GOOGLE_MAPS_API_KEY
        self.base_url = base_url
        self.rate_limiter = AsyncLimiter(max_rate=CONCURRENCY, time_period=1.0)
        self._session: Optional[ClientSession] = None

    async def _get_session(self) -> ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = ClientSession(timeout=ClientTimeout(total=30))
        return self._session

    async def get_json(self, params: Dict[str, str]) -> Dict[str, Any]:
        """
        GET the geocoding endpoint and return the parsed JSON body.

        Args:
            params: Query parameters (the API key is added here).

        Returns:
            Parsed JSON response.
        """
        async with self.rate_limiter:
            session = await self._get_session()
            try:
                async with session.get(
                    self.base_url,
                    params={**params, "key": self.api_key},
                ) as resp:
                    data = await resp.json()
                    status = data.get("status")
                    if status not in ("OK", "ZERO_RESULTS"):
                        raise Exception(
                            f"Geocoding API error ({status}): {data.get('error_message', 'no details')}"
                        )
                    return data
            except Exception as e:
                logger.debug(f"⚠️ Geocoding request failed: {e}")
                raise

    async def geocode(self, address: str, region: str = "uk") -> Optional[Coordinates]:
        """
        Look up coordinates for a free-text address or postcode.

        Returns:
            Coordinates of the first result, or None when nothing matched.
        """
        data = await self.get_json({"address": address, "region": region})
        results = data.get("results") or []
        if not results:
            return None
        location = results[0].get("geometry", {}).get("location", {})
        if "lat" not in location or "lng" not in location:
            return None
        return Coordinates(lat=float(location["lat"]), lng=float(location["lng"]))

    async def close(self):
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
