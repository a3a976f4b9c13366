"""
In-memory stores for profiles, matches and saved jobs.

MatchStore owns the persistence contract of the engine: at most one match per
(user_id, business_id), and a per-user replace that swaps the whole match set
in one step under an asyncio.Lock, so concurrent regenerations for the same
user never interleave.
"""
import asyncio
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional

from loguru import logger

from skillbridge.errors import (
    AlreadySavedError,
    DuplicateMatchError,
    MatchNotFoundError,
    ProfileNotFoundError,
)
from skillbridge.models import Match, SavedJob, UserProfile


class ProfileStore:
    """Read access to user profiles."""

    def __init__(self, profiles: Optional[List[UserProfile]] = None):
        self._profiles: Dict[str, UserProfile] = {p.id: p for p in profiles or []}

    async def get(self, user_id: str) -> UserProfile:
        try:
            return self._profiles[user_id]
        except KeyError:
            raise ProfileNotFoundError(f"No profile for user {user_id}") from None


class MatchStore:
    """
    Match storage with a unique (user_id, business_id) index.

    Per-user locks are created on first use and live as long as the store,
    one per user id seen; lock_for always returns the same lock for a user.
    """

    def __init__(self):
        self._by_user: Dict[str, List[Match]] = {}
        self._locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def lock_for(self, user_id: str) -> asyncio.Lock:
        return self._locks[user_id]

    @staticmethod
    def _check_unique(user_id: str, matches: List[Match]) -> None:
        seen = set()
        for match in matches:
            if match.user_id != user_id:
                raise ValueError(f"Match {match.id} belongs to {match.user_id}, not {user_id}")
            if match.business_id in seen:
                raise DuplicateMatchError(
                    f"Duplicate match for user {user_id} and business {match.business_id}"
                )
            seen.add(match.business_id)

    async def replace_all(self, user_id: str, matches: List[Match]) -> None:
        """
        Discard every stored match for user_id and store `matches` instead.

        The new set is validated before anything is touched, then swapped in
        whole: readers see either the old set or the new one, never a mix.

        Raises:
            DuplicateMatchError: Two matches share a business id.
            ValueError: A match belongs to another user.
        """
        self._check_unique(user_id, matches)
        async with self.lock_for(user_id):
            previous = len(self._by_user.get(user_id, []))
            self._by_user[user_id] = list(matches)
        logger.debug(f"Replaced {previous} matches with {len(matches)} for user {user_id}")

    async def list_for_user(self, user_id: str, active_only: bool = True) -> List[Match]:
        """Stored matches for a user, highest relevance first."""
        matches = [m for m in self._by_user.get(user_id, []) if m.active or not active_only]
        return sorted(matches, key=lambda m: m.relevance_score, reverse=True)

    async def get(self, match_id: str, user_id: Optional[str] = None) -> Match:
        users = [user_id] if user_id is not None else list(self._by_user)
        for uid in users:
            for match in self._by_user.get(uid, []):
                if match.id == match_id:
                    return match
        raise MatchNotFoundError(f"Match {match_id} not found")

    async def mark_email_drafted(self, match_id: str, user_id: Optional[str] = None) -> Match:
        match = await self.get(match_id, user_id)
        async with self.lock_for(match.user_id):
            match.email_drafted = True
        return match

    async def mark_email_sent(self, match_id: str, user_id: Optional[str] = None) -> Match:
        match = await self.get(match_id, user_id)
        async with self.lock_for(match.user_id):
            match.email_sent = True
            match.email_sent_at = datetime.now()
        return match


def _job_key(title: str, company: str):
    return (title or "").strip().lower(), (company or "").strip().lower()


class SavedJobStore:
    """
    Additive save path for jobs picked by hand.

    Unlike regeneration there is no wholesale replace here, so duplicates are
    checked on (title, company) before insert.
    """

    def __init__(self):
        self._jobs: Dict[str, List[SavedJob]] = defaultdict(list)

    async def save(self, user_id: str, job: SavedJob) -> SavedJob:
        key = _job_key(job.title, job.company)
        if any(_job_key(j.title, j.company) == key for j in self._jobs[user_id]):
            raise AlreadySavedError(f"'{job.title}' at {job.company} is already saved")
        self._jobs[user_id].append(job)
        return job

    async def list(self, user_id: str) -> List[SavedJob]:
        return list(self._jobs.get(user_id, []))

    async def remove(self, user_id: str, job_id: str) -> bool:
        """Remove a saved job; returns False when there was nothing to remove."""
        jobs = self._jobs.get(user_id, [])
        kept = [j for j in jobs if j.id != job_id]
        self._jobs[user_id] = kept
        return len(kept) != len(jobs)
