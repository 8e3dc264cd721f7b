"""Unit tests for the application draft record."""

import dataclasses
from datetime import datetime, timedelta, timezone

import pytest

from jobready.draft import FIELD_NAMES, WIRE_NAMES, ApplicationDraft, attribute_name
from jobready.errors import UnknownFieldError

from tests.conftest import NOW, all_valid_fields


class TestWireNames:
    """Test attribute <-> camelCase mapping."""

    def test_camel_case_names(self):
        assert WIRE_NAMES["street_address"] == "streetAddress"
        assert WIRE_NAMES["accept_false_info"] == "acceptFalseInfo"
        assert WIRE_NAMES["has_it_experience"] == "hasITExperience"
        assert WIRE_NAMES["submitted_at"] == "submittedAt"

    def test_mapping_is_bidirectional(self):
        for attr, wire in WIRE_NAMES.items():
            assert FIELD_NAMES[wire] == attr

    def test_attribute_name_accepts_both_forms(self):
        assert attribute_name("otherCountry") == "other_country"
        assert attribute_name("other_country") == "other_country"

    def test_unknown_name_raises(self):
        with pytest.raises(UnknownFieldError) as exc_info:
            attribute_name("favouriteColour")
        assert "favouriteColour" in str(exc_info.value)


class TestDraftEditing:
    """Test immutable field updates."""

    def test_empty_draft_serializes_to_empty_dict(self):
        assert ApplicationDraft().to_dict() == {}

    def test_with_field_returns_new_draft(self):
        draft = ApplicationDraft()
        updated = draft.with_field("city", "Parramatta")
        assert draft.city is None
        assert updated.city == "Parramatta"
        assert updated.get("city") == "Parramatta"

    def test_draft_is_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            ApplicationDraft().name = "x"

    def test_submitted_at_cannot_be_set_as_a_field(self):
        with pytest.raises(UnknownFieldError):
            ApplicationDraft().with_field("submittedAt", "2026-01-01T00:00:00Z")

    def test_round_trip_through_payload(self):
        fields = all_valid_fields()
        draft = ApplicationDraft.from_dict(fields)
        assert draft.to_dict() == fields

    def test_from_dict_ignores_unknown_keys(self):
        draft = ApplicationDraft.from_dict({"name": "Jane", "utm_source": "ad"})
        assert draft.to_dict() == {"name": "Jane"}


class TestStamp:
    """Test the submission timestamp."""

    def test_stamp_sets_utc_iso_timestamp(self):
        stamped = ApplicationDraft(name="Jane").stamp(NOW)
        assert stamped.submitted_at == "2026-10-19T08:30:15.250Z"
        assert stamped.to_dict()["submittedAt"] == "2026-10-19T08:30:15.250Z"

    def test_stamp_converts_other_timezones(self):
        sydney = timezone(timedelta(hours=11))
        stamped = ApplicationDraft().stamp(datetime(2026, 10, 19, 19, 30, tzinfo=sydney))
        assert stamped.submitted_at == "2026-10-19T08:30:00.000Z"

    def test_stamp_leaves_original_untouched(self):
        draft = ApplicationDraft(name="Jane")
        draft.stamp(NOW)
        assert draft.submitted_at is None

    def test_stamp_without_clock_uses_current_time(self):
        stamped = ApplicationDraft().stamp()
        parsed = datetime.fromisoformat(stamped.submitted_at.replace("Z", "+00:00"))
        assert abs(datetime.now(timezone.utc) - parsed) < timedelta(minutes=1)
