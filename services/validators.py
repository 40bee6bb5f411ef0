"""Валидаторы и нормализаторы входных данных импорта."""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import NamedTuple

_TWO_PLACES = Decimal("0.01")
_CURRENCY_JUNK = re.compile(r"[$,\s]")
# ведущее число, как у «мягкого» разбора float: "700.00/mo" → 700.00
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class ParsedName(NamedTuple):
    first_name: str
    last_name: str


def clean_currency(amount: str | None) -> str:
    """Очистить денежную строку и вернуть сумму с двумя знаками.

    Убирает ``$``, запятые и пробелы. Пустое или нечисловое значение даёт
    ``"0.00"``, как и число, не помещающееся в точность Decimal
    (например, ``"1e30"``). Отрицательные суммы не отбрасываются.

    Args:
        amount: Исходная строка, например ``"$1,242.50"``.

    Returns:
        str: Сумма в формате ``"1242.50"``.
    """
    if amount is None:
        return "0.00"
    cleaned = _CURRENCY_JUNK.sub("", str(amount))
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return "0.00"
    try:
        value = Decimal(match.group(0)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # не помещается в точность контекста (например, "1e30")
        return "0.00"
    return str(value)


def parse_client_name(full_name: str | None) -> ParsedName:
    """Разбить полное имя на имя и фамилию.

    Одно слово считается именем, два делятся напрямую, при трёх и более
    первое слово идёт в имя, остальные через пробел в фамилию.
    """
    parts = (full_name or "").split()
    if not parts:
        return ParsedName("", "")
    if len(parts) == 1:
        return ParsedName(parts[0], "")
    return ParsedName(parts[0], " ".join(parts[1:]))


def normalize_phone(phone: str | None) -> str:
    """Нормализовать американский номер телефона.

    Args:
        phone: Исходный номер.

    Returns:
        str: Номер в формате ``(XXX) XXX-XXXX``; если цифр не 10 (или 11 с
        ведущей ``1``), возвращается исходная строка без крайних пробелов.
    """
    text = (phone or "").strip()
    if not text:
        return ""
    digits = re.sub(r"\D", "", text)
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    if len(digits) != 10:
        return text
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"


def notes_mark_inactive(notes: str | None) -> bool:
    """True, если в заметках встречается ``case inactive`` (без учёта регистра)."""
    return "case inactive" in (notes or "").lower()
