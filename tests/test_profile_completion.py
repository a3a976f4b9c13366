from datetime import datetime
from dataclasses import replace

from skillbridge.models import CareerPreferences, LocationPreference, UserProfile
from skillbridge.profile_completion import WEIGHTS, calculate_profile_completion


def test_weights_total_hundred():
    assert sum(WEIGHTS.values()) == 100


def test_new_profile_only_has_basics():
    user = UserProfile(id="u", first_name="Sam", last_name="Lee", email="sam@example.ac.uk")

    result = calculate_profile_completion(user)

    assert result.percentage == 20
    assert result.completed_fields == ["basics"]
    assert not result.is_complete
    # top three by weight: education 25, skills 20, location 15
    assert [s.id for s in result.next_steps] == ["education", "skills", "location"]
    assert result.next_steps[1].title == "Add 3 More Skills"


def test_partial_profile(student):
    # student fixture: two skills, no graduation date, no CV
    result = calculate_profile_completion(student)

    assert result.percentage == 20 + 15 + 10
    assert {m.field for m in result.missing_fields} == {"education", "skills", "cv"}
    skills = next(m for m in result.missing_fields if m.field == "skills")
    assert skills.label == "Add 1 More Skills"


def test_complete_profile_suggests_finding_opportunities(student):
    user = replace(
        student,
        skills=["Python", "SQL", "Excel"],
        expected_graduation=datetime(2027, 6, 1),
        resume_url="https://cdn.example/cv.pdf",
    )

    result = calculate_profile_completion(user)

    assert result.percentage == 100
    assert result.is_complete
    assert result.missing_fields == []
    assert [s.id for s in result.next_steps] == ["find_opportunities"]


def test_location_needs_city_and_postcode(student):
    user = replace(
        student,
        location_preference=LocationPreference(city="London", postcode=""),
        career_preferences=CareerPreferences(),
    )
    result = calculate_profile_completion(user)
    assert "location" not in result.completed_fields
    assert "preferences" not in result.completed_fields
