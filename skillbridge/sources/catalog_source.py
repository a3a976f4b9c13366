"""
Candidate source backed by the stored business catalog.

The radius check here is approximate (an equirectangular
projection over numpy arrays, playing the part of a geo-index query);
the regeneration controller re-checks exact Haversine distance.
"""
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
from loguru import logger

from skillbridge.config import CATALOG_QUERY_LIMIT, EARTH_RADIUS_MILES
from skillbridge.models import BusinessCandidate, CandidateFilters, Coordinates
from skillbridge.sources.base import parse_candidates

# slack over the exact radius; the controller re-checks with Haversine
APPROX_SLACK = 1.01


def approx_distances_miles(
    center: Coordinates, lats: np.ndarray, lngs: np.ndarray
) -> np.ndarray:
    """Equirectangular distance from center to every (lat, lng) pair, in miles."""
    lat0 = np.radians(center.lat)
    d_lat = np.radians(lats) - lat0
    d_lng = (np.radians(lngs) - np.radians(center.lng)) * np.cos((np.radians(lats) + lat0) / 2)
    return EARTH_RADIUS_MILES * np.sqrt(d_lat ** 2 + d_lng ** 2)


def _row_to_record(row: pd.Series) -> Dict[str, Any]:
    """Convert a catalog row to a plain dict, turning NaN into None."""
    def safe_get(col):
        if col not in row.index:
            return None
        val = row[col]
        if pd.isna(val):
            return None
        return val

    return {
        "id": safe_get("id"),
        "name": safe_get("name"),
        "industry": safe_get("industry"),
        "lat": safe_get("lat"),
        "lng": safe_get("lng"),
        "relevantSkills": safe_get("relevant_skills"),
        "description": safe_get("description"),
        "city": safe_get("city"),
        "address": safe_get("address"),
        "contactInfo": {
            k: v for k, v in {
                "email": safe_get("email"),
                "phone": safe_get("phone"),
                "website": safe_get("website"),
            }.items() if v is not None
        },
    }


def _is_active(row: pd.Series) -> bool:
    if "is_active" not in row.index or pd.isna(row["is_active"]):
        return True
    value = row["is_active"]
    if isinstance(value, str):
        return value.strip().lower() not in ("false", "0", "no")
    return bool(value)


class CatalogCandidateSource:
    """
    Geo lookup over a read-only business catalog.

    `query` feeds regeneration and returns every match in the radius unless a
    limit was given at construction. `search` is the capped browse path.
    """

    def __init__(self, businesses: List[BusinessCandidate], limit: Optional[int] = None):
        self.businesses = list(businesses)
        self.limit = limit
        self._lats = np.array([b.coordinates.lat for b in self.businesses], dtype=float)
        self._lngs = np.array([b.coordinates.lng for b in self.businesses], dtype=float)

    @classmethod
    def from_frame(cls, df: pd.DataFrame, limit: Optional[int] = None) -> "CatalogCandidateSource":
        """Build the catalog from a DataFrame; inactive rows are left out."""
        records = [_row_to_record(row) for _, row in df.iterrows() if _is_active(row)]
        businesses = parse_candidates(records, source="catalog")
        logger.debug(f"Catalog loaded: {len(businesses)} active businesses from {len(df)} rows")
        return cls(businesses, limit=limit)

    @classmethod
    def from_csv(cls, file_path: str, limit: Optional[int] = None) -> "CatalogCandidateSource":
        return cls.from_frame(pd.read_csv(file_path), limit=limit)

    @staticmethod
    def _passes_filters(business: BusinessCandidate, filters: CandidateFilters) -> bool:
        if filters.industry and filters.industry.lower() not in business.industry.lower():
            return False
        if filters.skills:
            wanted = [s.lower() for s in filters.skills]
            have = [s.lower() for s in business.relevant_skills]
            if not any(w in h for w in wanted for h in have):
                return False
        return True

    def _nearby(
        self,
        center: Coordinates,
        radius_miles: float,
        filters: Optional[CandidateFilters],
        limit: Optional[int],
    ) -> List[BusinessCandidate]:
        if not self.businesses:
            return []
        filters = filters or CandidateFilters()

        distances = approx_distances_miles(center, self._lats, self._lngs)
        nearby = np.flatnonzero(distances <= radius_miles * APPROX_SLACK)
        ordered = nearby[np.argsort(distances[nearby], kind="stable")]

        results = []
        for idx in ordered:
            business = self.businesses[idx]
            if self._passes_filters(business, filters):
                results.append(business)
            if limit is not None and len(results) >= limit:
                break

        logger.debug(
            f"Catalog lookup ({center.lat:.4f}, {center.lng:.4f}) r={radius_miles}mi → {len(results)} candidates"
        )
        return results

    async def query(
        self,
        center: Coordinates,
        radius_miles: float,
        filters: Optional[CandidateFilters] = None,
    ) -> List[BusinessCandidate]:
        """
        Return catalog businesses roughly within radius_miles of center, nearest first.

        Args:
            center (Coordinates): Search centre.
            radius_miles (float): Search radius in miles.
            filters (Optional[CandidateFilters]): Industry substring and/or skills filter.

        Returns:
            List[BusinessCandidate]: All candidates in the radius, or up to `limit` when one was set.
        """
        return self._nearby(center, radius_miles, filters, self.limit)

    async def search(
        self,
        center: Coordinates,
        radius_miles: float,
        filters: Optional[CandidateFilters] = None,
        limit: int = CATALOG_QUERY_LIMIT,
    ) -> List[BusinessCandidate]:
        """Browse nearby businesses, nearest first, at most `limit` of them."""
        return self._nearby(center, radius_miles, filters, limit)
