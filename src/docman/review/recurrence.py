"""Recurring review schedule computation.

Given the moment a review cycle completes and the document's interval and
period settings, compute when the next cycle opens and when it is due.
Month and year steps use calendar arithmetic: the day of month is kept and
clamped to the length of the target month, the way date pickers behave.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from docman.database.models.document import ReviewInterval, ReviewPeriod

_INTERVAL_MONTHS: dict[ReviewInterval, int] = {
    ReviewInterval.monthly: 1,
    ReviewInterval.quarterly: 3,
    ReviewInterval.semiannually: 6,
    ReviewInterval.annually: 12,
}

_PERIOD_DAYS: dict[ReviewPeriod, int] = {
    ReviewPeriod.one_week: 7,
    ReviewPeriod.two_weeks: 14,
    ReviewPeriod.three_weeks: 21,
}


@dataclass(frozen=True)
class ReviewSchedule:
    """Next cycle dates; both are None when no next cycle can be scheduled."""

    opens_for_review: datetime | None
    review_due: datetime | None


def add_months(moment: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the target month's length."""
    return moment + relativedelta(months=months)


def _as_interval(value: ReviewInterval | str | None) -> ReviewInterval | None:
    if value is None or isinstance(value, ReviewInterval):
        return value
    try:
        return ReviewInterval(value)
    except ValueError:
        return None


def _as_period(value: ReviewPeriod | str | None) -> ReviewPeriod | None:
    if value is None or isinstance(value, ReviewPeriod):
        return value
    try:
        return ReviewPeriod(value)
    except ValueError:
        return None


def next_opens_for_review(
    now: datetime,
    interval: ReviewInterval | str | None,
    interval_days: int | None = None,
) -> datetime | None:
    """When the next review cycle opens.

    Args:
        now: Moment the current cycle completed.
        interval: Review interval (enum member or its value).
        interval_days: Interval length, used only for ``custom``.

    Returns:
        The opening moment, or None when the interval is missing,
        unrecognised, or ``custom`` without a day count.
    """
    resolved = _as_interval(interval)
    if resolved is None:
        return None
    if resolved is ReviewInterval.custom:
        if not interval_days:
            return None
        return now + timedelta(days=interval_days)
    return add_months(now, _INTERVAL_MONTHS[resolved])


def next_review_due(
    opens_for_review: datetime | None,
    period: ReviewPeriod | str | None,
) -> datetime | None:
    """Due date of a cycle opening at ``opens_for_review``.

    Returns:
        The due moment, or None when there is no opening date or the period
        is missing or unrecognised.
    """
    if opens_for_review is None:
        return None
    resolved = _as_period(period)
    if resolved is None:
        return None
    if resolved is ReviewPeriod.one_month:
        return add_months(opens_for_review, 1)
    return opens_for_review + timedelta(days=_PERIOD_DAYS[resolved])


def compute_next_schedule(
    now: datetime,
    interval: ReviewInterval | str | None,
    interval_days: int | None,
    period: ReviewPeriod | str | None,
) -> ReviewSchedule:
    """Compute both next-cycle dates from the document's settings."""
    opens = next_opens_for_review(now, interval, interval_days)
    return ReviewSchedule(opens_for_review=opens, review_due=next_review_due(opens, period))
