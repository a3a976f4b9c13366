"""
Candidate source interface and the boundary validation every source applies.

Sources hand back only well-formed BusinessCandidate objects: raw records
missing coordinates, industry or a name are skipped with a warning so one bad
record never blocks scoring the rest.
"""
import hashlib
import math
from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable

from loguru import logger

from skillbridge.errors import MalformedCandidateError
from skillbridge.models import BusinessCandidate, CandidateFilters, Coordinates


@runtime_checkable
class CandidateSource(Protocol):
    """Anything that can list businesses near a point.

    The catalog lookup and the LLM generator both satisfy this; the
    regeneration controller never cares which one it was given.
    """

    async def query(
        self,
        center: Coordinates,
        radius_miles: float,
        filters: Optional[CandidateFilters] = None,
    ) -> List[BusinessCandidate]:
        ...


def _first(raw: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def _as_float(value: Any) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def split_skills(value: Any) -> List[str]:
    """Accept a list of skills or a ';'/','-separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        sep = ";" if ";" in value else ","
        return [s.strip() for s in value.split(sep) if s.strip()]
    if isinstance(value, float) and math.isnan(value):
        return []
    return [str(s).strip() for s in value]


def _extract_coordinates(raw: Dict[str, Any]) -> Optional[Coordinates]:
    coords = raw.get("coordinates")
    if isinstance(coords, dict):
        lat, lng = _as_float(coords.get("lat")), _as_float(coords.get("lng"))
    else:
        lat = _as_float(_first(raw, "lat", "latitude"))
        lng = _as_float(_first(raw, "lng", "lon", "longitude"))
    if lat is None or lng is None:
        return None
    return Coordinates(lat=lat, lng=lng)


def _extract_address(raw: Dict[str, Any]) -> Dict[str, str]:
    """Business city and one-line address, from an address dict or flat fields."""
    found = {}
    address = raw.get("address")
    if isinstance(address, dict):
        parts = [address.get(k) for k in ("street", "city", "state", "zipCode", "postcode")]
        line = ", ".join(str(p).strip() for p in parts if p)
        if line:
            found["address"] = line
        if address.get("city"):
            found["city"] = str(address["city"]).strip()
    elif address:
        found["address"] = str(address).strip()

    city = _first(raw, "city")
    if city is None and isinstance(raw.get("location"), str):
        city = raw["location"]
    if city and "city" not in found:
        found["city"] = str(city).strip()
    return found


def ephemeral_business_id(name: str, coordinates: Coordinates) -> str:
    """Id for a generated business; stable only for identical name and location."""
    key = f"{name.strip().lower()}|{coordinates.lat:.5f}|{coordinates.lng:.5f}"
    return "llm-" + hashlib.sha1(key.encode("utf-8")).hexdigest()[:12]


def parse_candidate(raw: Dict[str, Any], source: str = "catalog") -> BusinessCandidate:
    """
    Validate one raw business record and build a BusinessCandidate.

    Args:
        raw (Dict[str, Any]): Record from the catalog or the LLM reply.
        source (str): "catalog" or "llm".

    Returns:
        BusinessCandidate: The validated candidate.

    Raises:
        MalformedCandidateError: When name, industry or coordinates are missing.
    """
    name = _first(raw, "name", "company", "businessName")
    if not name:
        raise MalformedCandidateError("business record has no name")
    industry = _first(raw, "industry", "type")
    if not industry:
        raise MalformedCandidateError(f"business '{name}' has no industry")
    coordinates = _extract_coordinates(raw)
    if coordinates is None:
        raise MalformedCandidateError(f"business '{name}' has no usable coordinates")

    contact = dict(raw.get("contactInfo") or raw.get("contact") or {})
    for key in ("email", "phone", "website", "linkedIn", "decisionMaker", "pitch", "potentialRoles"):
        if raw.get(key) is not None and key not in contact:
            contact[key] = raw[key]
    for key, value in _extract_address(raw).items():
        contact.setdefault(key, value)

    business_id = _first(raw, "id", "_id")
    if business_id is None:
        business_id = ephemeral_business_id(str(name), coordinates)

    return BusinessCandidate(
        id=str(business_id),
        name=str(name).strip(),
        industry=str(industry).strip(),
        coordinates=coordinates,
        relevant_skills=split_skills(_first(raw, "relevantSkills", "relevant_skills", "skills")),
        description=str(raw.get("description") or ""),
        contact=contact,
        source=source,
    )


def parse_candidates(records: Iterable[Dict[str, Any]], source: str) -> List[BusinessCandidate]:
    """Parse a batch, skipping malformed records with a warning."""
    candidates = []
    for raw in records:
        try:
            candidates.append(parse_candidate(raw, source=source))
        except MalformedCandidateError as e:
            logger.warning(f"Skipping malformed {source} candidate: {e}")
    return candidates
