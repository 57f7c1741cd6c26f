"""Tests for sprint labels, keys, and date ranges."""

from datetime import date

from piboard.tracker.sprints import (
    SprintKey,
    fallback_date_range,
    first_wednesday,
    future_sprint_keys,
    parse_sprint_label,
    record_sprint_dates,
    sort_sprint_keys,
    sprint_dates,
)


class TestParseSprintLabel:
    def test_team_and_key(self):
        label = parse_sprint_label("Triton 2025-25")
        assert label.team == "Triton"
        assert str(label.key) == "2025-25"

    def test_multi_word_team(self):
        label = parse_sprint_label("Gadget Hackwrench 2024-7")
        assert label.team == "Gadget Hackwrench"
        assert label.key == SprintKey(2024, 7)

    def test_bare_key(self):
        label = parse_sprint_label("2025-3")
        assert label.team is None
        assert str(label.key) == "2025-3"

    def test_garbage(self):
        assert parse_sprint_label("Sprint Zero") is None
        assert parse_sprint_label("Backlog") is None

    def test_number_zero_invalid(self):
        assert parse_sprint_label("Triton 2025-0") is None


class TestSprintKey:
    def test_rollover_past_last_sprint(self):
        assert SprintKey.normalized(2025, 26) == SprintKey(2026, 1)
        assert str(SprintKey.parse("2025-26")) == "2026-1"

    def test_ordering(self):
        assert SprintKey(2024, 25) < SprintKey(2025, 1) < SprintKey(2025, 2)

    def test_next(self):
        assert SprintKey(2025, 25).next() == SprintKey(2026, 1)


class TestFutureSprints:
    def test_single_rollover(self):
        assert future_sprint_keys("2025-25", 1) == ["2026-1"]

    def test_several(self):
        assert future_sprint_keys("2025-24", 3) == ["2025-25", "2026-1", "2026-2"]

    def test_backlog_has_no_future(self):
        assert future_sprint_keys("Backlog", 3) == []


class TestSortSprintKeys:
    def test_backlog_first_then_numeric(self):
        keys = ["2025-10", "Backlog", "2025-2", "2024-25", "2025-2"]
        assert sort_sprint_keys(keys) == ["Backlog", "2024-25", "2025-2", "2025-10"]


class TestDates:
    def test_first_wednesday(self):
        assert first_wednesday(2025) == date(2025, 1, 1)
        assert first_wednesday(2026) == date(2026, 1, 7)

    def test_fallback_range(self):
        assert fallback_date_range("2025-1") == "01/01/2025 - 01/14/2025"
        assert fallback_date_range("2025-2") == "01/15/2025 - 01/28/2025"

    def test_fallback_custom_length(self):
        assert fallback_date_range("2025-2", sprint_length_days=7) == "01/08/2025 - 01/14/2025"

    def test_record_dates(self):
        fields = (("Sprint Start Date", "01/01/2025"), ("Sprint End Date", "01/14/2025"))
        assert record_sprint_dates(fields) == "01/01/2025 - 01/14/2025"

    def test_record_start_only(self):
        assert record_sprint_dates((("Sprint Start", "03/03/2025"),)) == "03/03/2025"

    def test_record_dates_win_over_fallback(self):
        fields = (("Sprint Start Date", "a"), ("Sprint End Date", "b"))
        assert sprint_dates(fields, "2025-1") == "a - b"
        assert sprint_dates((), "2025-1") == "01/01/2025 - 01/14/2025"

    def test_backlog_has_no_dates(self):
        assert sprint_dates((), "Backlog") == ""
