from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from skillbridge.email_drafter import (
    LLMEmailDraftGenerator,
    TemplateEmailDraftGenerator,
    draft_email_for_match,
    split_sections,
)
from skillbridge.errors import EmailDraftError, MatchNotFoundError
from skillbridge.matchers.matching_orchestrator import MatchRegenerator

from conftest import FakeSource, make_business

LLM_REPLY = """--- SUBJECT LINE ---
CS Student - Python help for Business A

--- EMAIL BODY ---
Dear Team,
I would love to help.

--- FOLLOW-UP STRATEGY ---
Follow up in 3-5 business days.
"""


@pytest.mark.asyncio
async def test_template_draft_uses_matched_skills(student):
    student.expected_graduation = datetime(2027, 6, 1)
    business = make_business("A", skills=["python"])
    business.contact["city"] = "Cambridge"

    draft = await TemplateEmailDraftGenerator().draft(student, business, ["Python"])

    assert draft.to == "hello@A.example"
    assert draft.subject == "2nd Year Computer Science Student - Internship/Part-time Opportunity Inquiry"
    assert "I have experience with Python" in draft.body
    assert "your technology operations" in draft.body
    # the business's city, not the student's (London)
    assert "your work in technology and your location in Cambridge." in draft.body
    assert "London" not in draft.body
    assert "Expected Graduation: June 2027" in draft.body
    assert draft.business_name == "Business A"


@pytest.mark.asyncio
async def test_template_draft_without_matched_skills_lists_user_skills(student):
    draft = await TemplateEmailDraftGenerator().draft(student, make_business("A"), [])
    assert "I have skills in Python, SQL" in draft.body


@pytest.mark.asyncio
async def test_template_draft_omits_unknown_business_city(student):
    draft = await TemplateEmailDraftGenerator().draft(student, make_business("A"), ["Python"])
    assert "your location in" not in draft.body
    assert "because of your work in technology." in draft.body


def test_split_sections():
    sections = split_sections(LLM_REPLY)
    assert sections["SUBJECT LINE"] == "CS Student - Python help for Business A"
    assert sections["EMAIL BODY"].startswith("Dear Team,")
    assert "3-5 business days" in sections["FOLLOW-UP STRATEGY"]


@pytest.mark.asyncio
async def test_llm_draft_parses_sections(student):
    client = MagicMock()
    client.complete_text = AsyncMock(return_value=LLM_REPLY)

    draft = await LLMEmailDraftGenerator(client).draft(student, make_business("A"), ["Python"])

    assert draft.subject == "CS Student - Python help for Business A"
    assert draft.body == "Dear Team,\nI would love to help."
    prompt = client.complete_text.call_args.args[0]
    assert "Skills that match this company: Python" in prompt


@pytest.mark.asyncio
async def test_llm_draft_failure_raises(student):
    client = MagicMock()
    client.complete_text = AsyncMock(side_effect=RuntimeError("rate limited"))
    with pytest.raises(EmailDraftError):
        await LLMEmailDraftGenerator(client).draft(student, make_business("A"), [])


@pytest.mark.asyncio
async def test_draft_email_for_match_flags_match(student, match_store):
    source = FakeSource([make_business("A", skills=["python"])])
    [match] = await MatchRegenerator(match_store, source).regenerate(student)

    draft = await draft_email_for_match(match_store, student, match.id)

    assert "Business A" in draft.body
    stored = await match_store.get(match.id)
    assert stored.email_drafted is True
    assert stored.email_sent is False


@pytest.mark.asyncio
async def test_draft_email_for_unknown_match(student, match_store):
    with pytest.raises(MatchNotFoundError):
        await draft_email_for_match(match_store, student, "missing")
