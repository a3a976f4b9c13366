"""
Typed data models for the business matching engine.
All data structures used throughout the codebase should be defined here.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from skillbridge.config import DEFAULT_RADIUS_MILES


@dataclass(frozen=True)
class Coordinates:
    """Latitude/longitude pair in decimal degrees."""
    lat: float
    lng: float


@dataclass
class LocationPreference:
    """Where the user wants to work and how far they will travel."""
    city: str = ""
    postcode: str = ""
    radius: float = DEFAULT_RADIUS_MILES  # miles
    coordinates: Optional[Coordinates] = None


@dataclass
class CareerPreferences:
    industries: List[str] = field(default_factory=list)
    job_types: List[str] = field(default_factory=list)


@dataclass
class UserProfile:
    """Student profile. Read-only input to the matching engine."""
    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    university: str = ""
    major: str = ""
    year: str = ""
    expected_graduation: Optional[datetime] = None
    skills: List[str] = field(default_factory=list)
    location_preference: LocationPreference = field(default_factory=LocationPreference)
    career_preferences: CareerPreferences = field(default_factory=CareerPreferences)
    resume_url: Optional[str] = None
    experience: List[Dict[str, str]] = field(default_factory=list)  # {company, position, ...}
    projects: List[Dict[str, Any]] = field(default_factory=list)  # {name, description, ...}

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class BusinessCandidate:
    """Business under consideration for matching, validated at the source boundary."""
    id: str
    name: str
    industry: str
    coordinates: Coordinates
    relevant_skills: List[str] = field(default_factory=list)
    description: str = ""
    contact: Dict[str, Any] = field(default_factory=dict)  # opaque, passed through unchanged
    source: str = "catalog"  # catalog | llm


@dataclass
class CandidateFilters:
    """Optional narrowing applied by a candidate source."""
    industry: Optional[str] = None
    skills: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class MatchFactors:
    """Sub-scores behind a relevance score."""
    skills_match: float  # 0-100
    location_match: float  # 0-100
    industry_match: float  # 0-100
    distance_miles: float


@dataclass
class Match:
    """A scored (user, business) pairing produced by regeneration."""
    user_id: str
    business_id: str
    relevance_score: int  # 0-100
    match_factors: MatchFactors
    matched_skills: List[str] = field(default_factory=list)
    business: Optional[BusinessCandidate] = None
    email_drafted: bool = False
    email_sent: bool = False
    email_sent_at: Optional[datetime] = None
    active: bool = True
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "business_id": self.business_id,
            "business_name": self.business.name if self.business else None,
            "relevance_score": self.relevance_score,
            "skills_match": round(self.match_factors.skills_match, 2),
            "location_match": round(self.match_factors.location_match, 2),
            "industry_match": round(self.match_factors.industry_match, 2),
            "distance_miles": round(self.match_factors.distance_miles, 2),
            "matched_skills": self.matched_skills,
            "email_drafted": self.email_drafted,
            "email_sent": self.email_sent,
        }


@dataclass
class SavedJob:
    """A job the user saved by hand, outside the matching engine."""
    title: str
    company: str
    location: str = ""
    description: str = ""
    requirements: List[str] = field(default_factory=list)
    salary: Optional[str] = None
    job_type: Optional[str] = None
    url: Optional[str] = None
    contact_email: Optional[str] = None
    industry: Optional[str] = None
    pitch: Optional[str] = None
    saved_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass
class EmailDraft:
    """Outreach email ready for the user to review."""
    to: str
    subject: str
    body: str
    business_name: str
