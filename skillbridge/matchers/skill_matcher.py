from dataclasses import dataclass, field
from typing import Iterable, List


@dataclass
class SkillMatch:
    """Skill overlap between a user and a business."""
    score: float  # 0-100
    matched: List[str] = field(default_factory=list)


def _skills_overlap(user_skill: str, business_skills: List[str]) -> bool:
    """Symmetric, case-insensitive containment against any business skill."""
    needle = user_skill.lower()
    for business_skill in business_skills:
        hay = business_skill.lower()
        if needle in hay or hay in needle:
            return True
    return False


def match_skills(user_skills: Iterable[str], business_skills: Iterable[str]) -> SkillMatch:
    """
    Score how many of the user's skills a business can use.

    A user skill counts as matched when it is a substring of any business skill
    or any business skill is a substring of it, ignoring case. This is loose on
    purpose so that "JS" and "JavaScript" meet. Business skills are used as
    given, with no cleaning.

    Args:
        user_skills (Iterable[str]): Skills from the user profile, in the user's order.
        business_skills (Iterable[str]): Skills the business looks for.

    Returns:
        SkillMatch: score = matched / user skill count * 100, and the matched
                    user skills in the user's original order. Score is 0 when
                    either side is empty.
    """
    # exact duplicates collapse, first occurrence keeps its position
    users = list(dict.fromkeys(user_skills))
    businesses = list(business_skills)
    if not users or not businesses:
        return SkillMatch(score=0.0, matched=[])

    matched = [skill for skill in users if _skills_overlap(skill, businesses)]
    return SkillMatch(score=len(matched) / len(users) * 100, matched=matched)
