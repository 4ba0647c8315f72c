"""Tests for identifier generation and request validation."""

import json
import string
from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from app.registration.tickets import new_event_id, new_ticket
from app.schemas import EventIn

TICKET_SYMBOLS = set(string.ascii_letters + string.digits + "_-")


class TestTicketGenerator:
    """Tests for ticket and event id generation."""

    def test_ticket_code_format(self):
        """Test ticket codes are 18 URL-safe characters."""
        ticket_id, code = new_ticket()
        assert len(code) == 18
        assert set(code) <= TICKET_SYMBOLS
        assert len(ticket_id) == 36

    def test_tickets_are_unique(self):
        """Test generated tickets do not repeat."""
        tickets = [new_ticket() for _ in range(200)]
        assert len({ticket_id for ticket_id, _ in tickets}) == 200
        assert len({code for _, code in tickets}) == 200

    def test_event_id_format(self):
        """Test event ids are 12 alphanumerics."""
        event_id = new_event_id()
        assert len(event_id) == 12
        assert event_id.isalnum()


def event_in(**overrides) -> dict:
    start = datetime(2030, 5, 1, 18, 0, tzinfo=UTC)
    data = {
        "name": "Meetup",
        "description": "Hello",
        "organizer": "Crew",
        "start_date": start,
        "end_date": start + timedelta(hours=2),
        "location_type": "ONLINE",
    }
    data.update(overrides)
    return data


class TestEventIn:
    """Tests for the event request body."""

    def test_plain_description_is_wrapped(self):
        """Test plain text becomes a rich-text document."""
        body = EventIn.model_validate(event_in())
        doc = json.loads(body.description)
        assert doc["type"] == "doc"
        assert doc["content"][0]["content"][0]["text"] == "Hello"

    def test_json_description_is_kept(self):
        """Test JSON descriptions are stored unchanged."""
        raw = '{"type": "doc", "content": []}'
        assert EventIn.model_validate(event_in(description=raw)).description == raw

    def test_dates_normalized_to_utc(self):
        """Test dates are converted to UTC."""
        plus_two = timezone(timedelta(hours=2))
        start = datetime(2030, 5, 1, 20, 0, tzinfo=plus_two)
        body = EventIn.model_validate(
            event_in(start_date=start, end_date=start + timedelta(hours=1))
        )
        assert body.start_date == datetime(2030, 5, 1, 18, 0, tzinfo=UTC)
        assert body.start_date.tzinfo == UTC

    def test_end_must_follow_start(self):
        """Test the end date must follow the start date."""
        start = datetime(2030, 5, 1, 18, 0, tzinfo=UTC)
        with pytest.raises(ValidationError, match="End date must be after start date"):
            EventIn.model_validate(event_in(start_date=start, end_date=start))

    def test_venue_needs_location(self):
        """Test venue events need a location."""
        with pytest.raises(ValidationError, match="Location information is required"):
            EventIn.model_validate(event_in(location_type="VENUE"))

    def test_capacity_must_be_positive(self):
        """Test capacity must be positive."""
        with pytest.raises(ValidationError):
            EventIn.model_validate(event_in(capacity=0))
