"""Политики оценки планировки объекта по сумме аренды.

В источниках нет числа комнат, поэтому при создании объекта оно
выводится из аренды. Пороги (в долларах в месяц):

* спальни: < 800 → 1, < 1200 → 2, иначе 3;
* санузлы: < 900 → 1, иначе 2;
* площадь: < 800 → 650, < 1200 → 850, иначе 1100 кв. футов.

Политика — обычная функция ``Decimal -> UnitLayout``; резолвер принимает
любую с такой сигнатурой.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, NamedTuple


class UnitLayout(NamedTuple):
    bedrooms: int
    bathrooms: int
    square_footage: int | None = None


LayoutPolicy = Callable[[Decimal], UnitLayout]

DEFAULT_RENT = Decimal("1000")


def estimate_layout_from_rent(rent: Decimal) -> UnitLayout:
    bedrooms = 1 if rent < 800 else 2 if rent < 1200 else 3
    bathrooms = 1 if rent < 900 else 2
    square_footage = 650 if rent < 800 else 850 if rent < 1200 else 1100
    return UnitLayout(bedrooms, bathrooms, square_footage)


def single_unit_layout(rent: Decimal) -> UnitLayout:
    """Однокомнатный объект без площади, независимо от аренды."""
    return UnitLayout(1, 1, None)
