"""Scoring components and the match regeneration controller."""
from skillbridge.matchers.geo_distance import haversine_miles
from skillbridge.matchers.industry_matcher import match_industry
from skillbridge.matchers.matching_orchestrator import MatchRegenerator
from skillbridge.matchers.relevance_scorer import ScoringWeights, score_relevance
from skillbridge.matchers.skill_matcher import match_skills

__all__ = [
    "MatchRegenerator",
    "ScoringWeights",
    "haversine_miles",
    "match_industry",
    "match_skills",
    "score_relevance",
]
