from datetime import datetime, timezone

from config.settings import Config
from src.scheduler.models import (
    CandidateSlot, Participant, SearchConfiguration, SearchResult, TimezoneGuardrail,
    EMPTY_RESULT_MESSAGE, ROLE_HOST,
)

from conftest import team_template


def test_participant_defaults_follow_role():
    host = Participant.from_template({"role": "host", "timezone": "Europe/Berlin"}, 0)
    teammate = Participant.from_template({"timezone": "Europe/Berlin"}, 1)

    assert host.participant_id == "participant-1"
    assert (host.start_hour, host.end_hour) == (Config.HOST_HOURS_START, Config.HOST_HOURS_END)
    assert teammate.participant_id == "participant-2"
    assert (teammate.start_hour, teammate.end_hour) == (Config.TEAMMATE_HOURS_START, Config.TEAMMATE_HOURS_END)
    assert teammate.flexible_hours is False


def test_participant_name_fallback():
    assert Participant(participant_id="a", timezone="UTC", role=ROLE_HOST).name == "Host"
    assert Participant(participant_id="b", timezone="UTC").name == "Teammate"
    assert Participant(participant_id="c", timezone="UTC", display_name="Kim").name == "Kim"


def test_guardrail_display_label():
    assert TimezoneGuardrail("g", "Asia/Tokyo", "Tokyo").display_label == "Tokyo (Asia/Tokyo)"
    assert TimezoneGuardrail("g", "Asia/Tokyo").display_label == "Asia/Tokyo"


def test_host_and_view_timezone():
    config = SearchConfiguration.from_template(team_template())
    assert config.host.email == "host@example.com"
    assert config.effective_view_timezone == "America/Los_Angeles"

    viewed = SearchConfiguration.from_template(team_template(viewTimezone="Asia/Tokyo"))
    assert viewed.effective_view_timezone == "Asia/Tokyo"


def test_host_falls_back_to_first_participant():
    template = team_template()
    template["participants"][0]["role"] = "required"
    config = SearchConfiguration.from_template(template)
    assert config.host.email == "host@example.com"


def test_calendar_identifiers_are_unique_and_ordered():
    template = team_template()
    template["participants"][1]["calendarId"] = "team-calendar@example.com"
    template["participants"].append(
        {"email": " host@example.com ", "timezone": "America/Los_Angeles", "role": "optional"}
    )
    config = SearchConfiguration.from_template(template)

    assert config.calendar_identifiers() == [
        "primary", "host@example.com", "team-calendar@example.com", "london@example.com",
    ]


def test_template_round_trip():
    template = team_template(respectedTimezones=[{"timezone": "Asia/Tokyo", "label": "Tokyo"}])
    config = SearchConfiguration.from_template(template)

    restored = SearchConfiguration.from_template(config.to_template())

    assert restored == config


def test_trimmed_purpose():
    assert SearchConfiguration(purpose="  Sync  ", participants=()).trimmed_purpose == "Sync"


def test_candidate_slot_identity_and_dict():
    slot = CandidateSlot(
        start=datetime(2026, 10, 19, 17, 0, tzinfo=timezone.utc),
        end=datetime(2026, 10, 19, 18, 0, tzinfo=timezone.utc),
        participants=(),
        guardrails=(),
        summary_status="ideal",
    )

    assert slot.slot_id == "2026-10-19T17:00:00.000Z_2026-10-19T18:00:00.000Z"
    assert slot.to_dict() == {
        "id": slot.slot_id,
        "start": "2026-10-19T17:00:00.000Z",
        "end": "2026-10-19T18:00:00.000Z",
        "participants": [],
        "guardrails": [],
        "summaryStatus": "ideal",
    }


def test_empty_result_explains_itself():
    result = SearchResult(
        slots=[],
        search_start=datetime(2026, 10, 19, 15, 30, tzinfo=timezone.utc),
        search_end=datetime(2026, 10, 26, 15, 30, tzinfo=timezone.utc),
        calendar_ids=["primary"],
    )

    data = result.to_dict()
    assert data["message"] == EMPTY_RESULT_MESSAGE
    assert len(data["suggestions"]) == 3
    assert data["searchStart"] == "2026-10-19T15:30:00.000Z"
    assert data["capped"] is False
