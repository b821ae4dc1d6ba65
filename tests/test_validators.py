from utils.validators import DataSanitizer, RequestValidator

from conftest import team_template


def test_valid_configuration():
    assert RequestValidator.validate_config_structure(team_template()) == []


def test_missing_title_is_left_to_the_search():
    assert RequestValidator.validate_config_structure(team_template(meetingPurpose="")) == []


def test_not_an_object():
    assert RequestValidator.validate_config_structure(["nope"]) == ["Configuration must be a JSON object"]


def test_duration_and_window_options():
    errors = RequestValidator.validate_config_structure(team_template(duration=50, searchWindowDays=3))
    assert len(errors) == 2
    assert errors[0].startswith("Invalid duration: 50")
    assert errors[1].startswith("Invalid searchWindowDays: 3")


def test_participant_fields():
    template = team_template()
    template["participants"][1].update({"timezone": "Nowhere/Land", "startHour": "9am", "email": "sam-at-example"})

    errors = RequestValidator.validate_config_structure(template)

    assert "Participant 1 has invalid timezone: Nowhere/Land" in errors
    assert "Participant 1 has invalid startHour: 9am. Expected HH:MM" in errors
    assert "Invalid email format in participant 1: sam-at-example" in errors


def test_exactly_one_host():
    template = team_template()
    template["participants"][1]["role"] = "host"

    errors = RequestValidator.validate_config_structure(template)

    assert errors == ["Exactly one participant must have role 'host' (found 2)"]


def test_guardrail_timezones():
    errors = RequestValidator.validate_config_structure(
        team_template(respectedTimezones=[{"timezone": "Asia/Tokyo"}, {"timezone": "bad"}])
    )
    assert errors == ["Timezone guardrail 1 has invalid timezone"]


def test_view_timezone():
    errors = RequestValidator.validate_config_structure(team_template(viewTimezone="Moon/Base"))
    assert errors == ["Invalid viewTimezone: Moon/Base"]


def test_clock_time():
    assert RequestValidator.validate_clock_time("08:30")
    assert RequestValidator.validate_clock_time("8:30")
    assert not RequestValidator.validate_clock_time("24:00")
    assert not RequestValidator.validate_clock_time("08:75")


def test_selection_structure():
    assert RequestValidator.validate_selection_structure(
        [{"start": "2026-10-19T17:00:00.000Z", "end": "2026-10-19T18:00:00.000Z"}]
    ) == []
    assert RequestValidator.validate_selection_structure("slots") == ["'slots' must be a list"]
    assert RequestValidator.validate_selection_structure([{"start": "2026-10-19T17:00:00Z"}]) == [
        "Slot 0 must have 'start' and 'end' fields"
    ]
    assert RequestValidator.validate_selection_structure(
        [{"start": "tomorrow", "end": "2026-10-19T18:00:00Z"}]
    ) == ["Slot 0 has invalid start: tomorrow"]


def test_sanitize_config():
    template = team_template(meetingPurpose="  <b>Roadmap</b>   sync ")
    template["participants"][0]["email"] = " Host@Example.com "

    sanitized = DataSanitizer.sanitize_config(template)

    assert sanitized["meetingPurpose"] == "bRoadmap/b sync"
    assert sanitized["participants"][0]["email"] == "host@example.com"
    assert template["participants"][0]["email"] == " Host@Example.com "


def test_non_text_values_are_reported_not_raised():
    template = team_template(meetingPurpose=42, viewTimezone=7)
    template["participants"][0].update({"timezone": 5, "startHour": 9, "email": ["host@example.com"]})
    template["respectedTimezones"] = [{"timezone": 3, "label": {"city": "Tokyo"}}]

    errors = RequestValidator.validate_config_structure(template)

    assert "Configuration has non-text meetingPurpose: 42" in errors
    assert "Invalid viewTimezone: 7" in errors
    assert "Participant 0 has invalid timezone: 5" in errors
    assert "Participant 0 has invalid startHour: 9. Expected HH:MM" in errors
    assert "Participant 0 has non-text email: ['host@example.com']" in errors
    assert "Timezone guardrail 0 has invalid timezone" in errors
    assert "Timezone guardrail 0 has non-text label: {'city': 'Tokyo'}" in errors


def test_non_text_clock_and_instant():
    assert not RequestValidator.validate_clock_time(900)
    assert not RequestValidator.validate_clock_time(None)
    assert not RequestValidator.validate_iso_datetime(1760000000)
    assert RequestValidator.validate_selection_structure([{"start": 1, "end": 2}]) == [
        "Slot 0 has invalid start: 1", "Slot 0 has invalid end: 2",
    ]
