import math
from dataclasses import dataclass, field
from typing import Iterable, List

from skillbridge.config import INDUSTRY_WEIGHT, LOCATION_WEIGHT, SKILLS_WEIGHT
from skillbridge.models import MatchFactors
from skillbridge.matchers.industry_matcher import match_industry
from skillbridge.matchers.skill_matcher import match_skills


@dataclass(frozen=True)
class ScoringWeights:
    """Weights for the relevance blend. Skills dominate; location and industry tie."""
    skills: float = SKILLS_WEIGHT
    industry: float = INDUSTRY_WEIGHT
    location: float = LOCATION_WEIGHT


DEFAULT_WEIGHTS = ScoringWeights()


@dataclass
class RelevanceResult:
    relevance: int  # 0-100
    factors: MatchFactors
    matched_skills: List[str] = field(default_factory=list)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (built-in round() is banker's)."""
    return int(math.floor(value + 0.5))


def location_score(distance_miles: float, radius_miles: float) -> float:
    """Linear falloff from 100 at the centre to 0 at the radius, clamped at 0."""
    if radius_miles <= 0:
        raise ValueError(f"radius must be positive, got {radius_miles}")
    return max(0.0, 100 - (distance_miles / radius_miles) * 100)


def score_relevance(
    user_skills: Iterable[str],
    business_skills: Iterable[str],
    preferred_industries: Iterable[str],
    business_industry: str,
    distance_miles: float,
    radius_miles: float,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> RelevanceResult:
    """
    Combine skill, industry and location sub-scores into one relevance score.

    Args:
        user_skills (Iterable[str]): Skills from the user profile.
        business_skills (Iterable[str]): Skills the business looks for.
        preferred_industries (Iterable[str]): Industries the user prefers.
        business_industry (str): The business's industry label.
        distance_miles (float): Great-circle distance from the user to the business.
        radius_miles (float): The user's search radius; must be positive.
        weights (ScoringWeights): Blend weights (default 0.4/0.3/0.3).

    Returns:
        RelevanceResult: Integer relevance in [0, 100], the sub-scores and the matched skills.
    """
    skills = match_skills(user_skills, business_skills)
    industry_match = match_industry(preferred_industries, business_industry)
    location_match = location_score(distance_miles, radius_miles)

    blended = (
        skills.score * weights.skills
        + industry_match * weights.industry
        + location_match * weights.location
    )
    relevance = max(0, min(100, round_half_up(blended)))

    factors = MatchFactors(
        skills_match=skills.score,
        location_match=location_match,
        industry_match=industry_match,
        distance_miles=distance_miles,
    )
    return RelevanceResult(relevance=relevance, factors=factors, matched_skills=skills.matched)
