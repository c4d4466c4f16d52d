from datetime import date, timedelta

import pytest

from doq.errors import RecurrenceOverflow
from doq.models import Days, Months, Never, Years
from doq.recurrence import days_until_due, next_due_date

D = date


def test_days_until_due():
    assert days_until_due(D(2017, 5, 27), D(2017, 5, 27)) == 0
    assert days_until_due(D(2017, 5, 27), D(2017, 5, 26)) == 1
    assert days_until_due(D(2017, 5, 27), D(2017, 5, 28)) == -1
    assert days_until_due(D(2017, 4, 27), D(2017, 5, 27)) == -30
    assert days_until_due(D(2017, 5, 27), D(2017, 6, 27)) == -31
    assert days_until_due(D(2017, 5, 27), D(2016, 5, 27)) == 365
    assert days_until_due(D(2016, 5, 27), D(2015, 5, 27)) == 366


def test_never_repeats_returns_none():
    assert next_due_date(D(2017, 5, 27), D(2017, 5, 27), Never()) is None
    assert next_due_date(D(2017, 5, 27), D(2019, 1, 1), Never()) is None
    assert next_due_date(D(2017, 5, 27), D(2017, 1, 1), Never()) is None


@pytest.mark.parametrize(
    "repeat, expected",
    [
        (Days(1), D(2017, 5, 28)),
        (Days(5), D(2017, 6, 1)),
        (Days(365), D(2018, 5, 27)),
        (Months(1), D(2017, 6, 27)),
        (Months(12), D(2018, 5, 27)),
        (Months(14), D(2018, 7, 27)),
        (Years(1), D(2018, 5, 27)),
        (Years(7), D(2024, 5, 27)),
    ],
)
def test_completed_on_due_date(repeat, expected):
    assert next_due_date(D(2017, 5, 27), D(2017, 5, 27), repeat) == expected


@pytest.mark.parametrize(
    "completed, repeat, expected",
    [
        (D(2017, 5, 30), Days(1), D(2017, 5, 31)),
        (D(2017, 5, 30), Days(2), D(2017, 5, 31)),
        (D(2017, 5, 30), Days(3), D(2017, 6, 2)),
        (D(2017, 5, 31), Months(1), D(2017, 6, 27)),
        (D(2017, 8, 31), Months(1), D(2017, 9, 27)),
        (D(2017, 12, 12), Years(1), D(2018, 5, 27)),
        (D(2020, 12, 12), Years(1), D(2021, 5, 27)),
    ],
)
def test_completed_late_catches_up_on_the_lattice(completed, repeat, expected):
    assert next_due_date(D(2017, 5, 27), completed, repeat) == expected


def test_completed_early_keeps_due_date():
    assert next_due_date(D(2017, 5, 30), D(2017, 5, 27), Days(1)) == D(2017, 5, 30)
    assert next_due_date(D(2017, 5, 30), D(2017, 5, 27), Months(3)) == D(2017, 5, 30)


@pytest.mark.parametrize("repeat", [Days(1), Days(7), Days(30), Months(1), Months(5), Years(1), Years(3)])
@pytest.mark.parametrize("d", [D(2017, 5, 27), D(2016, 2, 29), D(2019, 12, 31), D(2020, 1, 31)])
def test_next_due_is_strictly_after_completion_on_due_date(d, repeat):
    assert next_due_date(d, d, repeat) > d


def test_one_interval_late_advances_exactly_one_interval():
    anchor = D(2017, 5, 27)
    on_time = next_due_date(anchor, anchor, Days(7))
    late = next_due_date(anchor, on_time, Days(7))
    assert late == on_time + timedelta(days=7)

    on_time = next_due_date(anchor, anchor, Months(2))
    late = next_due_date(anchor, on_time, Months(2))
    assert late == D(2017, 9, 27)


def test_weekly_task_left_for_two_months_stays_on_its_weekday():
    anchor = D(2017, 5, 27)  # a Saturday
    due = next_due_date(anchor, D(2017, 7, 27), Days(7))
    assert due == D(2017, 7, 29)
    assert due.weekday() == anchor.weekday()


def test_month_end_clamps_to_last_day_of_target_month():
    assert next_due_date(D(2017, 1, 31), D(2017, 1, 31), Months(1)) == D(2017, 2, 28)
    assert next_due_date(D(2016, 1, 31), D(2016, 1, 31), Months(1)) == D(2016, 2, 29)
    assert next_due_date(D(2017, 5, 31), D(2017, 5, 31), Months(1)) == D(2017, 6, 30)


def test_clamped_month_does_not_drift_later_points():
    # Catching up from Jan 31 lands back on the 31st once the month allows it.
    assert next_due_date(D(2017, 1, 31), D(2017, 3, 1), Months(1)) == D(2017, 3, 31)


def test_leap_day_yearly_clamps_then_recovers():
    assert next_due_date(D(2016, 2, 29), D(2016, 2, 29), Years(1)) == D(2017, 2, 28)
    assert next_due_date(D(2016, 2, 29), D(2019, 3, 1), Years(1)) == D(2020, 2, 29)


def test_month_rollover_carries_into_year():
    assert next_due_date(D(2017, 11, 15), D(2017, 11, 15), Months(3)) == D(2018, 2, 15)


def test_past_end_of_calendar_raises():
    with pytest.raises(RecurrenceOverflow):
        next_due_date(D(9999, 12, 1), D(9999, 12, 31), Months(1))
    with pytest.raises(RecurrenceOverflow):
        next_due_date(D(9999, 12, 30), D(9999, 12, 31), Days(5))


def test_unknown_rule_is_rejected():
    with pytest.raises(TypeError):
        next_due_date(D(2017, 5, 27), D(2017, 5, 27), "3d")
