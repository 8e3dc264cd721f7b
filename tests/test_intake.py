"""Unit tests for intake date generation and formatting."""

from datetime import date, timedelta

import pytest

from jobready.intake import (
    INTAKE_COUNT,
    cadence_for,
    first_intake,
    format_intake,
    intake_dates,
    intake_options,
    matches_cadence,
    parse_intake,
)

MONDAY = date(2026, 10, 19)
THURSDAY = date(2026, 10, 22)
SUNDAY = date(2026, 10, 25)

THURSDAY_WEEKDAY = 3
SUNDAY_WEEKDAY = 6


class TestCadence:
    """Test which weekday each course starts on."""

    def test_cyber_security_starts_on_thursdays(self):
        assert cadence_for("cyber-security").weekday == THURSDAY_WEEKDAY

    @pytest.mark.parametrize("course", ["helpdesk-l1", "support-l2", None, "unknown"])
    def test_other_courses_start_on_sundays(self, course):
        assert cadence_for(course).weekday == SUNDAY_WEEKDAY


class TestIntakeDates:
    """Test the ten candidate start dates."""

    @pytest.mark.parametrize("today", [MONDAY + timedelta(days=n) for n in range(7)])
    def test_cyber_security_yields_ten_increasing_thursdays(self, today):
        dates = intake_dates("cyber-security", today)

        assert len(dates) == INTAKE_COUNT
        assert all(d.weekday() == THURSDAY_WEEKDAY for d in dates)
        assert all(a < b for a, b in zip(dates, dates[1:]))
        assert dates[0] >= today

    @pytest.mark.parametrize("today", [MONDAY + timedelta(days=n) for n in range(7)])
    def test_sunday_courses_yield_ten_weekly_sundays(self, today):
        dates = intake_dates("helpdesk-l1", today)

        assert len(dates) == INTAKE_COUNT
        assert all(d.weekday() == SUNDAY_WEEKDAY for d in dates)
        assert all((b - a).days == 7 for a, b in zip(dates, dates[1:]))
        assert dates[0] > today

    def test_thursday_intake_can_start_today(self):
        assert first_intake("cyber-security", THURSDAY) == THURSDAY

    def test_sunday_intake_never_starts_today(self):
        assert first_intake("support-l2", SUNDAY) == SUNDAY + timedelta(days=7)

    def test_first_dates_from_a_monday(self):
        assert first_intake("cyber-security", MONDAY) == THURSDAY
        assert first_intake("helpdesk-l1", MONDAY) == SUNDAY

    def test_options_are_iso_dates(self):
        options = intake_options("cyber-security", MONDAY)
        assert options[:2] == ["2026-10-22", "2026-10-29"]
        assert options[-1] == "2026-12-24"

    def test_custom_count(self):
        assert len(intake_dates("helpdesk-l1", MONDAY, count=3)) == 3


class TestParsingAndFormatting:
    """Test reading stored intake values back."""

    @pytest.mark.parametrize(
        "value", ["2026-10-22", "2026-10-22T00:00:00.000Z", THURSDAY],
    )
    def test_parse_accepted_forms(self, value):
        assert parse_intake(value) == THURSDAY

    @pytest.mark.parametrize("value", [None, "", "next week", "2026-13-40", 20261022, ["2026-10-22"]])
    def test_parse_unusable_values(self, value):
        assert parse_intake(value) is None

    def test_matches_cadence(self):
        assert matches_cadence("cyber-security", "2026-10-22")
        assert not matches_cadence("helpdesk-l1", "2026-10-22")
        assert not matches_cadence("helpdesk-l1", "garbage")
        assert not matches_cadence("cyber-security", 20261022)

    def test_format_intake(self):
        assert format_intake("2026-10-22") == "Thursday, 22 October 2026"
        assert format_intake("2026-11-01") == "Sunday, 1 November 2026"

    def test_format_falls_back_to_raw_value(self):
        assert format_intake("soon") == "soon"
        assert format_intake(None) == ""
        assert format_intake(20261022) == "20261022"
