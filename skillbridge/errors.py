"""
Exception taxonomy for the matching engine.

Profile and candidate-source errors abort a whole regeneration and bubble to
the caller. Malformed candidates are recovered locally (skipped with a warning).
"""


class SkillBridgeError(Exception):
    """Base class for all engine errors."""


class ProfileIncompleteError(SkillBridgeError):
    """User profile lacks the location or skills data needed for matching."""


class ProfileNotFoundError(SkillBridgeError):
    """No profile stored for the requested user id."""


class CandidateSourceError(SkillBridgeError):
    """Candidate source failed; regeneration aborts without writing."""


class CandidateSourceTimeout(CandidateSourceError):
    """Candidate source did not answer within the caller's timeout."""


class MalformedCandidateError(SkillBridgeError, ValueError):
    """A raw business record is missing coordinates, industry or name."""


class AlreadySavedError(SkillBridgeError):
    """The job is already in the user's saved list."""


class MatchNotFoundError(SkillBridgeError):
    pass


class DuplicateMatchError(SkillBridgeError):
    """A match set contains two matches for the same (user, business) pair."""


class EmailDraftError(SkillBridgeError):
    pass
