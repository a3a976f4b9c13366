from dataclasses import replace

from loguru import logger

from skillbridge.clients import GeocodingClient
from skillbridge.config import FALLBACK_LAT, FALLBACK_LNG
from skillbridge.models import Coordinates, UserProfile

FALLBACK_COORDINATES = Coordinates(lat=FALLBACK_LAT, lng=FALLBACK_LNG)


async def geocode_postcode(client: GeocodingClient, postcode: str, city: str = "") -> Coordinates:
    """
    Resolve a UK postcode (and optional city) to coordinates.

    Falls back to central London when no API key is configured, the lookup
    fails, or nothing matches, so onboarding is never blocked on geocoding.

    Args:
        client (GeocodingClient): Geocoding client.
        postcode (str): Postcode entered by the user.
        city (str): Optional city to disambiguate the postcode.

    Returns:
        Coordinates: Resolved or fallback coordinates.
    """
    if not client.api_key:
        logger.debug("Geocoding API key not found, using fallback coordinates for London")
        return FALLBACK_COORDINATES

    address = ", ".join(part for part in (postcode, city) if part)
    try:
        coords = await client.geocode(address)
    except Exception as e:
        logger.warning(f"Geocoding failed for '{address}': {e}")
        return FALLBACK_COORDINATES
    return coords or FALLBACK_COORDINATES


async def with_coordinates(user: UserProfile, client: GeocodingClient) -> UserProfile:
    """Copy of the profile with coordinates filled from its postcode, when missing."""
    pref = user.location_preference
    if pref.coordinates is not None or not pref.postcode:
        return user
    coords = await geocode_postcode(client, pref.postcode, pref.city)
    return replace(user, location_preference=replace(pref, coordinates=coords))
