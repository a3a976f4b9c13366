from typing import Iterable

NO_PREFERENCE_SCORE = 50.0
MATCH_SCORE = 100.0
MISMATCH_SCORE = 25.0


def match_industry(preferred_industries: Iterable[str], business_industry: str) -> float:
    """
    Score a business's industry against the user's preferred industries.

    Args:
        preferred_industries (Iterable[str]): Industries the user asked for.
        business_industry (str): The business's industry label.

    Returns:
        float: 50 with no preferences, 100 when any preference contains or is
               contained in the business industry (case-insensitive), else 25.
    """
    preferences = [p.lower() for p in preferred_industries]
    if not preferences:
        return NO_PREFERENCE_SCORE

    industry = business_industry.lower()
    if any(p in industry or industry in p for p in preferences):
        return MATCH_SCORE
    return MISMATCH_SCORE
