# tiffin/domain/pricing.py
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from tiffin.utils.settings import TAX_RATE

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def calculate_totals(items: Iterable, tax_rate: Decimal = TAX_RATE) -> Totals:
    """
    Liczy subtotal, podatek i total dla pozycji z polami price i quantity.
    Wszystko zaokraglone half-up do groszy, total = subtotal + tax
    (sumujemy juz zaokraglone kwoty, wiec total zawsze sie zgadza).
    """
    subtotal = to_money(
        sum((Decimal(str(i.price)) * i.quantity for i in items), Decimal("0.00"))
    )
    tax = to_money(subtotal * tax_rate)
    return Totals(subtotal=subtotal, tax=tax, total=subtotal + tax)
