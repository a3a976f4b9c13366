"""
Profile completion: how much of a profile is filled in and what to do next.
"""
from dataclasses import dataclass, field
from typing import Dict, List

from skillbridge.models import UserProfile

# Field weights (must total 100)
WEIGHTS = {
    "basics": 20,  # name and email, always present after registration
    "education": 25,
    "skills": 20,  # at least MIN_SKILLS
    "location": 15,
    "preferences": 10,
    "cv": 10,
}
MIN_SKILLS = 3
MAX_NEXT_STEPS = 3

STEP_DESCRIPTIONS = {
    "education": "Add your university, major, and graduation year",
    "skills": "List your technical and soft skills",
    "location": "Set your preferred work location and radius",
    "preferences": "Choose job types and industries you're interested in",
    "cv": "Upload your CV for AI-powered analysis and matching",
}


@dataclass
class MissingField:
    field: str
    label: str
    weight: int


@dataclass
class NextStep:
    id: str
    title: str
    description: str
    priority: int


@dataclass
class ProfileCompletion:
    percentage: int
    completed_fields: List[str] = field(default_factory=list)
    missing_fields: List[MissingField] = field(default_factory=list)
    next_steps: List[NextStep] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.percentage >= 100


def _section_checks(user: UserProfile) -> Dict[str, bool]:
    pref = user.location_preference
    careers = user.career_preferences
    return {
        "basics": True,
        "education": bool(user.university and user.major and user.year and user.expected_graduation),
        "skills": len(user.skills) >= MIN_SKILLS,
        "location": bool(pref.city and pref.postcode),
        "preferences": bool(careers.job_types or careers.industries),
        "cv": bool(user.resume_url),
    }


def _label(section: str, user: UserProfile) -> str:
    if section == "skills":
        return f"Add {MIN_SKILLS - len(user.skills)} More Skills"
    return {
        "education": "Complete Education Details",
        "location": "Set Location Preferences",
        "preferences": "Add Job Preferences",
        "cv": "Upload Your CV",
    }[section]


def calculate_profile_completion(user: UserProfile) -> ProfileCompletion:
    """
    Weighted completion percentage plus the highest-impact next steps.

    Returns:
        ProfileCompletion: percentage, completed and missing sections, and up to
                           three next steps ordered by weight. A complete profile
                           gets a single "find opportunities" step.
    """
    checks = _section_checks(user)
    completed = [name for name, done in checks.items() if done]
    missing = [
        MissingField(field=name, label=_label(name, user), weight=WEIGHTS[name])
        for name, done in checks.items() if not done
    ]
    percentage = sum(WEIGHTS[name] for name in completed)

    if missing:
        ranked = sorted(missing, key=lambda m: m.weight, reverse=True)[:MAX_NEXT_STEPS]
        next_steps = [
            NextStep(id=m.field, title=m.label, description=STEP_DESCRIPTIONS[m.field], priority=m.weight)
            for m in ranked
        ]
    else:
        next_steps = [NextStep(
            id="find_opportunities",
            title="Find Job Opportunities",
            description="Use AI to discover roles that match your profile",
            priority=100,
        )]

    return ProfileCompletion(
        percentage=percentage,
        completed_fields=completed,
        missing_fields=missing,
        next_steps=next_steps,
    )
