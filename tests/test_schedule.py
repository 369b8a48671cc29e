from datetime import date, timedelta

import pytest

from tiffin.domain.constants import SubscriptionType
from tiffin.domain.schedule import SUNDAY, calculate_end_date, covers


def test_weekly_from_monday_skips_one_sunday():
    # wt-sb = 5 dni, niedziela 7.01 pominieta, pon 8.01 = szosty
    assert calculate_end_date(date(2024, 1, 1), "Weekly") == date(2024, 1, 8)


def test_monthly_from_monday():
    assert calculate_end_date(date(2024, 1, 1), SubscriptionType.MONTHLY) == date(2024, 1, 29)


def test_saturday_counts_as_delivery_day():
    # start w sobote: niedziela pominieta, pon-sob = 6
    assert calculate_end_date(date(2024, 1, 6), "Weekly") == date(2024, 1, 13)


def test_start_on_sunday():
    assert calculate_end_date(date(2024, 1, 7), "Weekly") == date(2024, 1, 13)


def test_unknown_plan_rejected():
    with pytest.raises(ValueError):
        calculate_end_date(date(2024, 1, 1), "Yearly")


@pytest.mark.parametrize("plan,target", [("Weekly", 6), ("Monthly", 24)])
def test_end_date_never_sunday_and_counts_target_days(plan, target):
    start = date(2024, 2, 20)
    for offset in range(35):
        begin = start + timedelta(days=offset)
        end = calculate_end_date(begin, plan)

        assert end.weekday() != SUNDAY

        counted = sum(
            1
            for n in range(1, (end - begin).days + 1)
            if (begin + timedelta(days=n)).weekday() != SUNDAY
        )
        assert counted == target


def test_covers_is_inclusive():
    start, end = date(2024, 3, 1), date(2024, 3, 10)

    assert covers(start, end, start)
    assert covers(start, end, end)
    assert not covers(start, end, date(2024, 3, 11))
    assert not covers(start, end, date(2024, 2, 29))
