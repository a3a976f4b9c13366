"""
Cold-outreach email drafting for stored matches.

Strictly downstream of scoring: drafting reads a match's matched skills and
business data, and only ever flips the match's email_drafted flag.
"""
import re
from typing import Dict, List, Optional, Protocol

from loguru import logger

from skillbridge.clients import OpenAIClient
from skillbridge.errors import EmailDraftError
from skillbridge.models import BusinessCandidate, EmailDraft, UserProfile
from skillbridge.stores import MatchStore

COLD_EMAIL_PROMPT = """You are an expert at writing COLD OUTREACH emails that get responses. This is an unsolicited email to a small company where no opportunity has been advertised.

STUDENT PROFILE:
- Name: {name}
- Email: {email}
- University: {university}
- Major: {major}
- Year: {year}
- Skills that match this company: {matched_skills}
- All skills: {skills}
- Work Experience: {experience}
- Projects: {projects}

TARGET COMPANY:
- Company Name: {business_name}
- Industry: {industry}
- Description: {description}
- Potential Roles: {roles}

Write a personal subject line, open with something specific about the company,
lead with 2-3 matching skills, ask for a brief 15-minute call, and keep the email
under 200 words.

FORMAT YOUR RESPONSE AS:

--- SUBJECT LINE ---
[Your subject line]

--- EMAIL BODY ---
[Your email content]

--- FOLLOW-UP STRATEGY ---
[How and when to follow up if no response]
"""

SECTION_RE = re.compile(r"---\s*([A-Z\- ]+?)\s*---")


class EmailDraftGenerator(Protocol):
    async def draft(
        self,
        user: UserProfile,
        business: BusinessCandidate,
        matched_skills: List[str],
    ) -> EmailDraft:
        ...


def _contact_email(business: BusinessCandidate) -> str:
    return str(business.contact.get("email") or "")


class TemplateEmailDraftGenerator:
    """Fills a fixed inquiry template from the profile and the match."""

    async def draft(
        self,
        user: UserProfile,
        business: BusinessCandidate,
        matched_skills: List[str],
    ) -> EmailDraft:
        subject = f"{user.year} {user.major} Student - Internship/Part-time Opportunity Inquiry".strip()
        if matched_skills:
            skills_text = f"I have experience with {', '.join(matched_skills[:3])}"
        else:
            skills_text = f"I have skills in {', '.join(user.skills[:3])}"

        city = business.contact.get("city")
        location_text = f" and your location in {city}" if city else ""
        industry = business.industry.lower()
        graduation = (
            f"\nExpected Graduation: {user.expected_graduation.strftime('%B %Y')}"
            if user.expected_graduation else ""
        )

        body = f"""Dear Hiring Manager,

I hope this email finds you well. My name is {user.full_name}, and I am a {user.year} {user.major} student at {user.university}. I am writing to inquire about potential internship or part-time opportunities at {business.name}.

{skills_text}, which I believe would be valuable for your {industry} operations. I am particularly interested in {business.name} because of your work in {industry}{location_text}.

I am eager to gain practical experience and contribute to your team while learning from industry professionals. I would welcome the opportunity to discuss how my academic background and enthusiasm can benefit your organization.

I have attached my resume for your review and would be happy to provide any additional information you might need. Thank you for considering my inquiry, and I look forward to hearing from you.

Best regards,
{user.full_name}
{user.email}
{user.university} - {user.major}{graduation}"""

        return EmailDraft(
            to=_contact_email(business),
            subject=subject,
            body=body,
            business_name=business.name,
        )


def split_sections(text: str) -> Dict[str, str]:
    """Split '--- NAME ---' delimited LLM output into {NAME: content}."""
    parts = SECTION_RE.split(text)
    # parts = [preamble, name1, content1, name2, content2, ...]
    return {
        parts[i].strip().upper(): parts[i + 1].strip()
        for i in range(1, len(parts) - 1, 2)
    }


class LLMEmailDraftGenerator:
    """Asks the LLM for a personalised cold email."""

    def __init__(self, client: OpenAIClient, temperature: float = 0.7):
        self.client = client
        self.temperature = temperature

    def build_prompt(self, user: UserProfile, business: BusinessCandidate, matched_skills: List[str]) -> str:
        roles = business.contact.get("potentialRoles") or []
        return COLD_EMAIL_PROMPT.format(
            name=user.full_name,
            email=user.email,
            university=user.university or "University",
            major=user.major or "their field of study",
            year=user.year or "current year",
            matched_skills=", ".join(matched_skills) or "None listed",
            skills=", ".join(user.skills),
            experience="; ".join(
                f"{e.get('position', '')} at {e.get('company', '')}" for e in user.experience
            ) or "Entry-level, eager to learn",
            projects="; ".join(
                f"{p.get('name', '')}: {p.get('description', '')}" for p in user.projects
            ) or "Academic projects and coursework",
            business_name=business.name,
            industry=business.industry,
            description=business.description or "Not provided",
            roles=", ".join(roles) or "Internship or part-time roles",
        )

    async def draft(
        self,
        user: UserProfile,
        business: BusinessCandidate,
        matched_skills: List[str],
    ) -> EmailDraft:
        prompt = self.build_prompt(user, business, matched_skills)
        try:
            text = await self.client.complete_text(prompt, temperature=self.temperature)
        except Exception as e:
            raise EmailDraftError(f"Failed to generate email for {business.name}: {e}") from e

        sections = split_sections(text)
        subject = sections.get("SUBJECT LINE") or f"{user.major} Student - Interest in {business.name}"
        body = sections.get("EMAIL BODY") or text
        follow_up = sections.get("FOLLOW-UP STRATEGY")
        if follow_up:
            logger.debug(f"Follow-up strategy for {business.name}: {follow_up}")

        return EmailDraft(
            to=_contact_email(business),
            subject=subject,
            body=body,
            business_name=business.name,
        )


async def draft_email_for_match(
    match_store: MatchStore,
    user: UserProfile,
    match_id: str,
    generator: Optional[EmailDraftGenerator] = None,
) -> EmailDraft:
    """
    Draft an outreach email for one of the user's stored matches and flag it as drafted.

    Raises:
        MatchNotFoundError: The match does not exist or belongs to someone else.
        EmailDraftError: The match carries no business data, or generation failed.
    """
    match = await match_store.get(match_id, user_id=user.id)
    if match.business is None:
        raise EmailDraftError(f"Match {match_id} has no business data to draft from")

    generator = generator or TemplateEmailDraftGenerator()
    draft = await generator.draft(user, match.business, match.matched_skills)
    await match_store.mark_email_drafted(match_id, user_id=user.id)
    return draft
