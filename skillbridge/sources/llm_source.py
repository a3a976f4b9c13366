import json
import re
from typing import Any, Dict, List, Optional

from loguru import logger
from rapidfuzz import fuzz

from skillbridge.clients import OpenAIClient
from skillbridge.config import COMPANY_SIZE_RANGE, NAME_DEDUP_THRESHOLD
from skillbridge.errors import CandidateSourceError
from skillbridge.models import BusinessCandidate, CandidateFilters, Coordinates, UserProfile
from skillbridge.sources.base import parse_candidates

PROMPT_TEMPLATE = """You are a career advisor helping a student find small companies to cold email about internships and part-time work.

Find companies with {company_size} employees: small enough that an email reaches a decision maker.

STUDENT PROFILE:
- Name: {name}
- University: {university}
- Major: {major}
- Year: {year}
- Skills: {skills}
- Work Experience: {experience}
- Projects: {projects}

SEARCH CRITERIA:
- What the student is looking for: {user_prompt}
- Location: {location} (centre {lat:.5f}, {lng:.5f})
- Search radius: {radius} miles
- Preferred job types: {job_types}
- Target industries: {industries}

Return a JSON object with this EXACT structure:
{{
  "businesses": [
    {{
      "company": "Company name",
      "industry": "Industry",
      "employeeCount": "75",
      "description": "What the company does",
      "city": "Town or city the company is based in",
      "coordinates": {{"lat": 0.0, "lng": 0.0}},
      "relevantSkills": ["skill the company would value", "..."],
      "website": "https://company.example",
      "email": "info@company.example",
      "potentialRoles": ["Role 1", "Role 2"],
      "pitch": "One sentence on why this student should reach out"
    }}
  ]
}}

Every company MUST lie within the search radius and carry real coordinates.
Provide 10-15 companies. Return ONLY the JSON object, no additional text.
"""


def repair_json(json_str: str) -> str:
    """Strip trailing commas before closing braces/brackets."""
    return re.sub(r",(\s*[}\]])", r"\1", json_str).strip()


def extract_json(text: str) -> Dict[str, Any]:
    """
    Pull a JSON object out of an LLM reply.

    Tries a fenced code block first, then the span from the first '{' to the
    last '}', then the same span with trailing commas removed.

    Raises:
        ValueError: When no parseable object is found.
    """
    json_str = text
    block = re.search(r"```json\s*([\s\S]*?)\s*```", text) or re.search(r"```\s*([\s\S]*?)\s*```", text)
    if block:
        json_str = block.group(1)

    start, end = json_str.find("{"), json_str.rfind("}")
    if start == -1 or end <= start:
        raise ValueError("No valid JSON structure found in response")
    json_str = json_str[start:end + 1]

    try:
        return json.loads(json_str)
    except json.JSONDecodeError:
        try:
            return json.loads(repair_json(json_str))
        except json.JSONDecodeError as e:
            raise ValueError(f"Could not parse or repair JSON response: {e}") from e


def dedupe_by_name(candidates: List[BusinessCandidate], threshold: float = NAME_DEDUP_THRESHOLD) -> List[BusinessCandidate]:
    """Drop generated businesses whose names are near-duplicates of an earlier one."""
    kept: List[BusinessCandidate] = []
    for cand in candidates:
        name = cand.name.lower()
        twin = next((k for k in kept if fuzz.ratio(name, k.name.lower()) >= threshold), None)
        if twin is not None:
            logger.debug(f"Dropping '{cand.name}' as a duplicate of '{twin.name}'")
            continue
        kept.append(cand)
    return kept


class LLMCandidateSource:
    """
    Candidate source that asks an LLM to propose plausible local businesses.

    One instance per search: the user profile and the free-text request shape the prompt.
    """

    def __init__(
        self,
        client: OpenAIClient,
        user: UserProfile,
        user_prompt: str = "",
        location_label: str = "",
        company_size_range: str = COMPANY_SIZE_RANGE,
        temperature: float = 0.4,
    ):
        self.client = client
        self.user = user
        self.user_prompt = user_prompt
        self.location_label = location_label
        self.company_size_range = company_size_range
        self.temperature = temperature

    def build_prompt(self, center: Coordinates, radius_miles: float, filters: CandidateFilters) -> str:
        user = self.user
        pref = user.location_preference
        industries = list(user.career_preferences.industries)
        if filters.industry and filters.industry not in industries:
            industries.append(filters.industry)
        skills = list(dict.fromkeys([*user.skills, *filters.skills]))
        experience = ", ".join(
            f"{e.get('position', '')} at {e.get('company', '')}" for e in user.experience
        )
        projects = ", ".join(p.get("name", "") for p in user.projects)
        return PROMPT_TEMPLATE.format(
            company_size=self.company_size_range,
            name=user.full_name or "Student",
            university=user.university or "Not specified",
            major=user.major or "Not specified",
            year=user.year or "Not specified",
            skills=", ".join(skills) or "Not specified",
            experience=experience or "Entry-level, seeking first opportunity",
            projects=projects or "None specified",
            user_prompt=self.user_prompt or "Opportunities matching profile and skills",
            location=self.location_label or pref.city or pref.postcode or "Not specified",
            lat=center.lat,
            lng=center.lng,
            radius=radius_miles,
            job_types=", ".join(user.career_preferences.job_types) or "Part-time, Internship, or flexible arrangements",
            industries=", ".join(industries) or "Any industry open to student talent",
        )

    async def query(
        self,
        center: Coordinates,
        radius_miles: float,
        filters: Optional[CandidateFilters] = None,
    ) -> List[BusinessCandidate]:
        """
        Generate candidate businesses near center.

        Raises:
            CandidateSourceError: When the LLM call fails or its reply holds no usable JSON.
        """
        filters = filters or CandidateFilters()
        prompt = self.build_prompt(center, radius_miles, filters)
        try:
            text = await self.client.complete_text(prompt, temperature=self.temperature)
        except Exception as e:
            raise CandidateSourceError(f"Failed to generate candidates: {e}") from e

        try:
            parsed = extract_json(text)
        except ValueError as e:
            logger.debug(f"Raw LLM reply (first 500 chars): {text[:500]}")
            raise CandidateSourceError(f"Failed to read generated candidates: {e}") from e

        records = parsed.get("businesses") or []
        if not isinstance(records, list):
            raise CandidateSourceError("Generated 'businesses' field is not a list")

        candidates = parse_candidates([r for r in records if isinstance(r, dict)], source="llm")
        candidates = dedupe_by_name(candidates)
        logger.debug(f"LLM proposed {len(records)} businesses, {len(candidates)} usable for user {self.user.id}")
        return candidates
