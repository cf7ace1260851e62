"""Tests for the structured resume model."""

from careerflow.domain import ContactInfo, Entry, Resume, resolve_display_name


def test_from_dict_camel_case():
    resume = Resume.from_dict(
        {
            "contactInfo": {"professionalTitle": "Dev", "email": None, "unknown": "x"},
            "summary": "Hi",
            "experience": [{"organization": "A", "startDate": "2020", "endDate": "2021", "current": False}],
            "jobDescription": "JD",
        }
    )
    assert resume.contact_info == ContactInfo(professional_title="Dev")
    assert resume.experience == [Entry(organization="A", start_date="2020", end_date="2021")]
    assert resume.job_description == "JD"


def test_from_dict_snake_case():
    resume = Resume.from_dict({"contact_info": {"professional_title": "Dev"}, "projects": [{"start_date": "2019"}]})
    assert resume.contact_info.professional_title == "Dev"
    assert resume.projects[0].start_date == "2019"


def test_to_dict_round_trips_through_from_dict(sample_resume):
    assert Resume.from_dict(sample_resume.to_dict()) == sample_resume


def test_from_dict_none():
    assert Resume.from_dict(None) == Resume()


def test_description_lines():
    assert Entry(description=" a \n\n b\n").description_lines() == ["a", "b"]
    assert Entry().description_lines() == []


def test_display_name_resolution():
    assert resolve_display_name("Jane Q Doe", "Jane", "Doe") == "Jane Q Doe"
    assert resolve_display_name("", "Jane", "Doe") == "Jane Doe"
    assert resolve_display_name("", "", "Doe") == "Doe"
    assert resolve_display_name() == "Your Name"


def test_current_flag_from_strings():
    assert Entry.from_dict({"current": "false"}).current is False
    assert Entry.from_dict({"current": ""}).current is False
    assert Entry.from_dict({"current": "True"}).current is True
    assert Entry.from_dict({"current": "on"}).current is True
    assert Entry.from_dict({"current": True}).current is True
