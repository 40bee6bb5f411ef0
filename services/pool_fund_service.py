"""Сервисные функции для учёта общего фонда (pool fund) округов."""

import logging
from dataclasses import dataclass
from decimal import Decimal

from database.models import Client, PoolFundEntry, PoolFundEntryType
from utils.money import format_usd

logger = logging.getLogger(__name__)

_ZERO = Decimal("0.00")


@dataclass
class CountyPoolSummary:
    county: str
    balance: Decimal = _ZERO
    total_deposits: Decimal = _ZERO
    total_withdrawals: Decimal = _ZERO
    entry_count: int = 0


def _signed_amount(entry: PoolFundEntry) -> Decimal:
    amount = Decimal(str(entry.amount))
    if entry.entry_type == PoolFundEntryType.DEPOSIT.value:
        return amount
    # withdrawal и allocation уменьшают баланс
    return -amount


# ───────────────────────── Добавление ─────────────────────────


def add_entry(
    county: str,
    amount,
    entry_type: str,
    description: str,
    *,
    client: Client | None = None,
    month: str | None = None,
) -> PoolFundEntry:
    """Добавить запись в фонд.

    Сумма должна быть положительной, тип — одним из
    :class:`PoolFundEntryType`.
    """
    county = (county or "").strip()
    if not county:
        raise ValueError("Поле 'county' обязательно для записи фонда")
    try:
        entry_type = PoolFundEntryType(entry_type).value
    except ValueError:
        raise ValueError(f"Неизвестный тип записи фонда: {entry_type}") from None
    value = Decimal(str(amount))
    if value <= 0:
        raise ValueError("Сумма записи фонда должна быть больше нуля")

    entry = PoolFundEntry.create(
        county=county,
        amount=value,
        entry_type=entry_type,
        description=description,
        client=client,
        month=month,
    )
    logger.info(
        "🏦 Фонд %s: %s %s (%s)", county, entry_type, format_usd(value), description
    )
    return entry


def record_deposit(county: str, amount, description: str, **kwargs) -> PoolFundEntry:
    return add_entry(county, amount, PoolFundEntryType.DEPOSIT, description, **kwargs)


def record_withdrawal(county: str, amount, description: str, **kwargs) -> PoolFundEntry:
    return add_entry(county, amount, PoolFundEntryType.WITHDRAWAL, description, **kwargs)


def record_reimbursement_surplus(
    county: str,
    reimbursement,
    rent_paid,
    deposit_paid,
    *,
    description: str | None = None,
    month: str | None = None,
    client: Client | None = None,
) -> PoolFundEntry | None:
    """Положить в фонд излишек возмещения округа над оплаченной арендой и депозитом.

    Если излишка нет, запись не создаётся и возвращается ``None``.
    """
    surplus = Decimal(str(reimbursement)) - Decimal(str(rent_paid)) - Decimal(str(deposit_paid))
    if surplus <= 0:
        return None
    return record_deposit(
        county,
        surplus,
        description or "Surplus from county reimbursement",
        month=month,
        client=client,
    )


# ───────────────────────── Получение ─────────────────────────


def get_entries(county: str | None = None):
    """Записи фонда, новые сначала."""
    query = PoolFundEntry.select()
    if county:
        query = query.where(PoolFundEntry.county == county)
    return query.order_by(PoolFundEntry.created_at.desc(), PoolFundEntry.id.desc())


def get_balance(county: str | None = None) -> Decimal:
    """Баланс фонда: депозиты минус списания (по округу или общий)."""
    return sum((_signed_amount(e) for e in get_entries(county)), _ZERO)


def get_summary_by_county() -> list[CountyPoolSummary]:
    """Сводка по округам, отсортированная по убыванию баланса."""
    summaries: dict[str, CountyPoolSummary] = {}
    for entry in PoolFundEntry.select().order_by(PoolFundEntry.id):
        summary = summaries.setdefault(entry.county, CountyPoolSummary(entry.county))
        summary.entry_count += 1
        signed = _signed_amount(entry)
        summary.balance += signed
        if signed > 0:
            summary.total_deposits += signed
        else:
            summary.total_withdrawals -= signed
    return sorted(summaries.values(), key=lambda s: s.balance, reverse=True)
