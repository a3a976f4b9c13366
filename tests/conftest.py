import asyncio
import math
from typing import List, Optional

import pytest

from skillbridge.config import EARTH_RADIUS_MILES
from skillbridge.errors import CandidateSourceError
from skillbridge.models import (
    BusinessCandidate,
    CandidateFilters,
    CareerPreferences,
    Coordinates,
    LocationPreference,
    UserProfile,
)
from skillbridge.stores import MatchStore

ORIGIN = Coordinates(lat=0.0, lng=0.0)


def north_of_origin(miles: float) -> Coordinates:
    """Point exactly `miles` great-circle miles due north of (0, 0)."""
    return Coordinates(lat=math.degrees(miles / EARTH_RADIUS_MILES), lng=0.0)


def make_business(
    business_id: str,
    miles: float = 0.0,
    industry: str = "Technology",
    skills: Optional[List[str]] = None,
    name: Optional[str] = None,
) -> BusinessCandidate:
    return BusinessCandidate(
        id=business_id,
        name=name or f"Business {business_id}",
        industry=industry,
        coordinates=north_of_origin(miles),
        relevant_skills=list(skills or []),
        contact={"email": f"hello@{business_id}.example"},
    )


class FakeSource:
    """Candidate source returning a fixed list and recording its calls."""

    def __init__(self, candidates: List[BusinessCandidate]):
        self.candidates = candidates
        self.calls = []

    async def query(self, center, radius_miles, filters: Optional[CandidateFilters] = None):
        self.calls.append((center, radius_miles, filters))
        return list(self.candidates)


class FailingSource:
    async def query(self, center, radius_miles, filters=None):
        raise CandidateSourceError("generation service unavailable")


class SlowSource:
    async def query(self, center, radius_miles, filters=None):
        await asyncio.sleep(5)
        return []


@pytest.fixture
def student() -> UserProfile:
    return UserProfile(
        id="user-1",
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.ac.uk",
        university="UCL",
        major="Computer Science",
        year="2nd Year",
        skills=["Python", "SQL"],
        location_preference=LocationPreference(
            city="London", postcode="WC1E 6BT", radius=10, coordinates=ORIGIN
        ),
        career_preferences=CareerPreferences(industries=["Technology"], job_types=["Internship"]),
    )


@pytest.fixture
def match_store() -> MatchStore:
    return MatchStore()
