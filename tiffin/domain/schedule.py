# tiffin/domain/schedule.py
from datetime import date, timedelta

from tiffin.domain.constants import PLAN_DELIVERY_DAYS, SubscriptionType

SUNDAY = 6  # date.weekday()


def calculate_end_date(start: date, plan: SubscriptionType | str) -> date:
    """
    Idzie dzien po dniu od start_date (bez samego startu) i liczy dni
    inne niz niedziela, az uzbiera 6 (Weekly) albo 24 (Monthly).
    Zwraca dzien, na ktorym licznik sie zamknal, wiec nigdy nie jest to niedziela.
    """
    target = PLAN_DELIVERY_DAYS[SubscriptionType(plan)]
    current = start
    counted = 0

    while counted < target:
        current += timedelta(days=1)
        if current.weekday() != SUNDAY:
            counted += 1

    return current


def covers(start: date, end: date, day: date) -> bool:
    return start <= day <= end
