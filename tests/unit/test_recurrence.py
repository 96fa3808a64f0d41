"""Unit tests for the recurring review schedule."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from docman.database.models.document import ReviewInterval, ReviewPeriod
from docman.review.recurrence import (
    ReviewSchedule,
    add_months,
    compute_next_schedule,
    next_opens_for_review,
    next_review_due,
)


def utc(year: int, month: int, day: int, hour: int = 0) -> datetime:
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


class TestAddMonths:
    @pytest.mark.parametrize(
        ("start", "months", "expected"),
        [
            (utc(2024, 1, 15), 1, utc(2024, 2, 15)),
            (utc(2024, 1, 31), 1, utc(2024, 2, 29)),
            (utc(2023, 1, 31), 1, utc(2023, 2, 28)),
            (utc(2024, 11, 30), 3, utc(2025, 2, 28)),
            (utc(2024, 8, 31), 6, utc(2025, 2, 28)),
            (utc(2024, 2, 29), 12, utc(2025, 2, 28)),
            (utc(2024, 12, 10), 1, utc(2025, 1, 10)),
        ],
    )
    def test_clamps_to_month_end(self, start: datetime, months: int, expected: datetime) -> None:
        assert add_months(start, months) == expected

    def test_keeps_time_and_timezone(self) -> None:
        result = add_months(utc(2024, 3, 5, 14), 1)
        assert result.hour == 14
        assert result.tzinfo is timezone.utc


class TestNextOpensForReview:
    @pytest.mark.parametrize(
        ("interval", "expected"),
        [
            (ReviewInterval.monthly, utc(2024, 2, 15)),
            (ReviewInterval.quarterly, utc(2024, 4, 15)),
            (ReviewInterval.semiannually, utc(2024, 7, 15)),
            (ReviewInterval.annually, utc(2025, 1, 15)),
        ],
    )
    def test_calendar_intervals(self, interval: ReviewInterval, expected: datetime) -> None:
        assert next_opens_for_review(utc(2024, 1, 15), interval) == expected

    def test_custom_interval_uses_days(self) -> None:
        assert next_opens_for_review(utc(2024, 1, 15), ReviewInterval.custom, 45) == utc(2024, 2, 29)

    @pytest.mark.parametrize("days", [None, 0])
    def test_custom_without_days_is_unscheduled(self, days: int | None) -> None:
        assert next_opens_for_review(utc(2024, 1, 15), ReviewInterval.custom, days) is None

    def test_accepts_stored_string_values(self) -> None:
        assert next_opens_for_review(utc(2024, 1, 15), "quarterly") == utc(2024, 4, 15)

    @pytest.mark.parametrize("interval", [None, "fortnightly"])
    def test_missing_or_unknown_interval(self, interval: str | None) -> None:
        assert next_opens_for_review(utc(2024, 1, 15), interval) is None


class TestNextReviewDue:
    @pytest.mark.parametrize(
        ("period", "expected"),
        [
            (ReviewPeriod.one_week, utc(2024, 4, 22)),
            (ReviewPeriod.two_weeks, utc(2024, 4, 29)),
            (ReviewPeriod.three_weeks, utc(2024, 5, 6)),
            (ReviewPeriod.one_month, utc(2024, 5, 15)),
            ("2weeks", utc(2024, 4, 29)),
        ],
    )
    def test_periods(self, period: ReviewPeriod | str, expected: datetime) -> None:
        assert next_review_due(utc(2024, 4, 15), period) == expected

    def test_no_opening_date(self) -> None:
        assert next_review_due(None, ReviewPeriod.one_week) is None

    @pytest.mark.parametrize("period", [None, "6weeks"])
    def test_missing_or_unknown_period(self, period: str | None) -> None:
        assert next_review_due(utc(2024, 4, 15), period) is None


class TestComputeNextSchedule:
    def test_quarterly_two_weeks(self) -> None:
        schedule = compute_next_schedule(
            utc(2024, 1, 15), ReviewInterval.quarterly, None, ReviewPeriod.two_weeks
        )
        assert schedule == ReviewSchedule(
            opens_for_review=utc(2024, 4, 15),
            review_due=utc(2024, 4, 29),
        )

    def test_custom_without_days_gives_null_schedule(self) -> None:
        schedule = compute_next_schedule(
            utc(2024, 1, 15), ReviewInterval.custom, None, ReviewPeriod.one_week
        )
        assert schedule == ReviewSchedule(opens_for_review=None, review_due=None)

    def test_opening_without_period(self) -> None:
        schedule = compute_next_schedule(utc(2024, 1, 15), ReviewInterval.monthly, None, None)
        assert schedule.opens_for_review == utc(2024, 2, 15)
        assert schedule.review_due is None
