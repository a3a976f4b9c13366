import math

import pytest

from skillbridge.matchers.geo_distance import haversine_miles
from skillbridge.matchers.industry_matcher import match_industry
from skillbridge.matchers.relevance_scorer import (
    ScoringWeights,
    location_score,
    round_half_up,
    score_relevance,
)
from skillbridge.matchers.skill_matcher import match_skills


# --- GeoDistance ---

def test_distance_to_self_is_zero():
    assert haversine_miles(51.5074, -0.1278, 51.5074, -0.1278) == 0


def test_distance_is_symmetric():
    london = (51.5074, -0.1278)
    manchester = (53.4808, -2.2426)
    assert haversine_miles(*london, *manchester) == pytest.approx(haversine_miles(*manchester, *london))


def test_distance_london_to_manchester_in_miles():
    # roughly 163 miles as the crow flies
    assert haversine_miles(51.5074, -0.1278, 53.4808, -2.2426) == pytest.approx(163, abs=2)


def test_distance_nan_propagates():
    assert math.isnan(haversine_miles(float("nan"), 0, 0, 0))


# --- SkillMatcher ---

def test_disjoint_skills_score_zero():
    result = match_skills(["Python", "SQL"], ["Welding", "Carpentry"])
    assert result.score == 0
    assert result.matched == []


def test_identical_skills_ignoring_case_score_hundred():
    result = match_skills(["Python", "SQL"], ["python", "sql"])
    assert result.score == 100
    assert result.matched == ["Python", "SQL"]


def test_containment_works_both_ways():
    # "JavaScript" contains "Java"; "React" is contained in "React Native"
    result = match_skills(["Java", "React Native", "Excel"], ["JavaScript", "React"])
    assert result.matched == ["Java", "React Native"]
    assert result.score == pytest.approx(200 / 3)


def test_empty_sides_score_zero():
    assert match_skills([], ["Python"]).score == 0
    assert match_skills(["Python"], []).score == 0


def test_matched_keeps_user_order_and_collapses_duplicates():
    result = match_skills(["SQL", "Python", "SQL"], ["python", "postgresql"])
    assert result.matched == ["SQL", "Python"]
    assert result.score == 100


def test_empty_business_skill_is_not_filtered():
    # an empty string is contained in every skill
    assert match_skills(["Python", "SQL"], [""]).score == 100


# --- IndustryAffinity ---

def test_no_preferences_is_neutral():
    assert match_industry([], "Manufacturing") == 50


def test_preference_contained_in_industry():
    assert match_industry(["tech"], "Technology") == 100


def test_industry_contained_in_preference():
    assert match_industry(["Financial Technology"], "technology") == 100


def test_mismatch_has_floor():
    assert match_industry(["Healthcare"], "Manufacturing") == 25


# --- RelevanceScorer ---

def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(79.49) == 79


def test_concrete_scenario_scores_eighty():
    result = score_relevance(
        ["Python", "SQL"], ["python", "excel"], ["Technology"], "Technology",
        distance_miles=0, radius_miles=10,
    )
    assert result.factors.skills_match == 50
    assert result.factors.industry_match == 100
    assert result.factors.location_match == 100
    assert result.relevance == 80
    assert result.matched_skills == ["Python"]


def test_location_clamped_at_radius_and_beyond():
    assert location_score(10, 10) == 0
    assert location_score(25, 10) == 0
    assert location_score(5, 10) == 50


def test_non_positive_radius_rejected():
    with pytest.raises(ValueError):
        location_score(1, 0)


def test_relevance_non_increasing_in_distance():
    scores = [
        score_relevance(["Python"], ["Python"], [], "Retail", distance_miles=d / 2, radius_miles=10).relevance
        for d in range(0, 41)
    ]
    assert scores == sorted(scores, reverse=True)
    # past the radius only the location part is floored
    assert scores[-1] == scores[20]


def test_custom_weights():
    weights = ScoringWeights(skills=1.0, industry=0.0, location=0.0)
    result = score_relevance(["Python", "SQL"], ["python"], [], "Retail", 9, 10, weights=weights)
    assert result.relevance == 50
