# skillbridge/matchers/matching_orchestrator.py
import asyncio
import math
import time
from typing import List, Optional

from loguru import logger

from skillbridge.config import CANDIDATE_TIMEOUT_SECONDS, MATCH_THRESHOLD
from skillbridge.errors import (
    CandidateSourceError,
    CandidateSourceTimeout,
    ProfileIncompleteError,
)
from skillbridge.models import BusinessCandidate, CandidateFilters, Match, UserProfile
from skillbridge.matchers.geo_distance import distance_between
from skillbridge.matchers.relevance_scorer import DEFAULT_WEIGHTS, ScoringWeights, score_relevance
from skillbridge.sources.base import CandidateSource
from skillbridge.stores import MatchStore, ProfileStore


def check_profile(user: UserProfile) -> None:
    """
    Raise ProfileIncompleteError unless the profile can be matched.

    Matching needs coordinates, a positive radius and at least one skill.
    """
    pref = user.location_preference
    if pref is None or pref.coordinates is None:
        raise ProfileIncompleteError(f"User {user.id} has no location coordinates")
    if not pref.radius or pref.radius <= 0:
        raise ProfileIncompleteError(f"User {user.id} has no usable search radius")
    if not user.skills:
        raise ProfileIncompleteError(f"User {user.id} has no skills")


def rank_matches(matches: List[Match]) -> List[Match]:
    """Descending relevance, then descending skills match; ties keep insertion order."""
    return sorted(
        matches,
        key=lambda m: (m.relevance_score, m.match_factors.skills_match),
        reverse=True,
    )


class MatchRegenerator:
    """
    Rebuilds a user's match set from a candidate source.

    Pull candidates within radius → re-check exact distance → score → drop
    scores at or below threshold → replace the user's stored matches in one step.
    """

    def __init__(
        self,
        match_store: MatchStore,
        candidate_source: Optional[CandidateSource] = None,
        threshold: int = MATCH_THRESHOLD,
        weights: ScoringWeights = DEFAULT_WEIGHTS,
        timeout: Optional[float] = CANDIDATE_TIMEOUT_SECONDS,
    ):
        self.match_store = match_store
        self.candidate_source = candidate_source
        self.threshold = threshold
        self.weights = weights
        self.timeout = timeout

    async def _fetch_candidates(
        self,
        source: CandidateSource,
        user: UserProfile,
        filters: Optional[CandidateFilters],
    ) -> List[BusinessCandidate]:
        pref = user.location_preference
        try:
            return await asyncio.wait_for(
                source.query(pref.coordinates, pref.radius, filters),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise CandidateSourceTimeout(
                f"Candidate source timed out after {self.timeout}s for user {user.id}"
            ) from e
        except CandidateSourceError:
            raise
        except Exception as e:
            raise CandidateSourceError(f"Candidate source failed for user {user.id}: {e}") from e

    def score_candidates(
        self,
        user: UserProfile,
        candidates: List[BusinessCandidate],
        threshold: int,
    ) -> List[Match]:
        """
        Score candidates for a user without touching storage.

        Candidates beyond the radius, with a NaN distance, repeating an earlier
        business id, or scoring at or below threshold are left out.
        """
        pref = user.location_preference
        seen = set()
        matches = []

        for cand in candidates:
            if cand.id in seen:
                logger.warning(f"Duplicate candidate {cand.id} ('{cand.name}') for user {user.id}; keeping the first")
                continue
            seen.add(cand.id)

            distance = distance_between(pref.coordinates, cand.coordinates)
            if math.isnan(distance):
                logger.warning(f"Skipping candidate {cand.id} ('{cand.name}'): distance is NaN")
                continue
            # the source's radius filter is approximate
            if distance > pref.radius:
                continue

            result = score_relevance(
                user.skills,
                cand.relevant_skills,
                user.career_preferences.industries,
                cand.industry,
                distance,
                pref.radius,
                weights=self.weights,
            )
            if result.relevance <= threshold:
                continue

            matches.append(Match(
                user_id=user.id,
                business_id=cand.id,
                relevance_score=result.relevance,
                match_factors=result.factors,
                matched_skills=result.matched_skills,
                business=cand,
            ))

        return rank_matches(matches)

    async def regenerate(
        self,
        user: UserProfile,
        candidate_source: Optional[CandidateSource] = None,
        threshold: Optional[int] = None,
        filters: Optional[CandidateFilters] = None,
    ) -> List[Match]:
        """
        Recompute and replace the user's whole match set.

        Args:
            user (UserProfile): Profile to match; never modified.
            candidate_source (Optional[CandidateSource]): Overrides the source given at construction.
            threshold (Optional[int]): Minimum relevance, exclusive (default 20).
            filters (Optional[CandidateFilters]): Passed through to the source.

        Returns:
            List[Match]: The stored matches, best first.

        Raises:
            ProfileIncompleteError: Profile lacks coordinates, radius or skills.
            CandidateSourceError: Source failed or timed out; stored matches are untouched.
        """
        check_profile(user)
        source = candidate_source or self.candidate_source
        if source is None:
            raise ValueError("No candidate source configured")
        threshold = self.threshold if threshold is None else threshold

        start = time.perf_counter()
        candidates = await self._fetch_candidates(source, user, filters)
        matches = self.score_candidates(user, candidates, threshold)
        await self.match_store.replace_all(user.id, matches)

        duration = time.perf_counter() - start
        logger.info(
            f"Generated {len(matches)} matches from {len(candidates)} candidates for user {user.id} in {duration:.2f}s"
        )
        return matches

    async def regenerate_for_user(
        self,
        user_id: str,
        profile_store: ProfileStore,
        threshold: Optional[int] = None,
    ) -> List[Match]:
        """Fetch the profile, then regenerate with the configured source."""
        user = await profile_store.get(user_id)
        return await self.regenerate(user, threshold=threshold)
