"""Создание или обновление клиента по естественному ключу."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from database.models import Client, ClientStatus
from services.validators import clean_currency, normalize_phone, notes_mark_inactive

from .dto import ClientRecord, Resolution, UpsertResult
from .entity_resolver import EntityResolver
from .profiles import MATCH_BY_COUNTY, CountyProfile

logger = logging.getLogger(__name__)


class MergeStrategy(str, Enum):
    """Как обновлять найденного клиента.

    ``OVERWRITE`` перезаписывает все поля новыми значениями, включая
    заглушки. ``COALESCE_EMPTY`` сохраняет уже заполненное значение там,
    где источник поля не содержал.
    """

    OVERWRITE = "overwrite"
    COALESCE_EMPTY = "coalesce_empty"


@dataclass(frozen=True)
class ClientPayload:
    values: dict[str, Any]
    # поля, которых не было в источнике и которые заполнены заглушками
    defaulted: frozenset[str]


class ClientUpserter:
    def __init__(
        self,
        company_id: int,
        resolver: EntityResolver,
        *,
        profile: CountyProfile | None = None,
        merge_strategy: MergeStrategy = MergeStrategy.OVERWRITE,
    ) -> None:
        self.company_id = company_id
        self.resolver = resolver
        self.profile = profile or resolver.profile
        self.merge_strategy = MergeStrategy(merge_strategy)

    def upsert(self, record: ClientRecord) -> UpsertResult:
        """Создать или обновить клиента из нормализованной записи.

        Записи без имени или фамилии пропускаются с предупреждением в логе.
        Исключения базы данных не перехватываются.
        """
        first_name = record.first_name.strip()
        last_name = record.last_name.strip()
        if not first_name or not last_name:
            logger.warning("⚠️ Пропущен клиент с некорректным именем: '%s'", record.display_name)
            return UpsertResult(
                "skipped", reason=f"Некорректное имя клиента: '{record.display_name}'"
            )

        resolution = self.resolver.resolve(
            record.management_name,
            record.rental_office_address,
            rent_amount=record.rent_amount,
            contact_email=record.email.strip() or None,
        )
        payload = self.build_payload(record, resolution)
        existing = self.find_existing(first_name, last_name, record.case_number.strip())

        if existing:
            updates = self._merge(existing, payload)
            for key, value in updates.items():
                setattr(existing, key, value)
            existing.save()
            logger.info(
                "✏️ Клиент id=%s: %s %s обновлён", existing.id, first_name, last_name
            )
            return UpsertResult("updated", existing.id, resolution)

        client = Client.create(**payload.values)
        logger.info("✅ Клиент id=%s: %s %s создан", client.id, first_name, last_name)
        return UpsertResult("created", client.id, resolution)

    def find_existing(
        self, first_name: str, last_name: str, case_number: str = ""
    ) -> Client | None:
        if self.profile.match_by == MATCH_BY_COUNTY:
            scope = Client.county == self.profile.county
        else:
            scope = Client.company == self.company_id

        condition = (
            (Client.first_name == first_name) & (Client.last_name == last_name) & scope
        )
        if self.profile.match_case_number and case_number:
            condition |= (Client.case_number == case_number) & scope

        return Client.active().where(condition).order_by(Client.id).first()

    def build_payload(
        self, record: ClientRecord, resolution: Resolution | None
    ) -> ClientPayload:
        profile = self.profile
        defaulted: set[str] = set()

        def pick(field: str, value: Any, default: Any) -> Any:
            if value not in (None, ""):
                return value
            defaulted.add(field)
            return default

        first_name = record.first_name.strip()
        last_name = record.last_name.strip()
        notes = profile.notes_separator.join(
            part.strip() for part in (record.notes, record.comments) if part and part.strip()
        )

        values: dict[str, Any] = {
            "company": self.company_id,
            "case_number": pick("case_number", record.case_number.strip(), None),
            "first_name": first_name,
            "last_name": last_name,
            "email": pick(
                "email",
                record.email.strip(),
                profile.synthetic_email(first_name, last_name),
            ),
            "phone": pick("phone", normalize_phone(record.phone), profile.default_phone),
            "date_of_birth": pick("date_of_birth", None, profile.default_date_of_birth),
            "ssn": pick("ssn", None, profile.default_ssn),
            "employment_status": pick(
                "employment_status", None, profile.default_employment_status
            ),
            "monthly_income": pick("monthly_income", None, Decimal("0.00")),
            "current_address": pick(
                "current_address", record.current_address.strip(), profile.default_address
            ),
            "county": profile.county or pick("county", record.county.strip(), None),
            "property_id": pick(
                "property_id", resolution.property_id if resolution else None, None
            ),
            "building_id": pick(
                "building_id", resolution.building_id if resolution else None, None
            ),
            "county_amount": pick(
                "county_amount",
                clean_currency(record.county_amount) if record.county_amount else None,
                None,
            ),
            "notes": pick("notes", notes, None),
            "subsidy_status": profile.subsidy_status,
            "grh_status": profile.grh_status,
        }

        inactive = notes_mark_inactive(notes)
        values["status"] = (ClientStatus.INACTIVE if inactive else ClientStatus.ACTIVE).value
        values["is_active"] = not inactive

        if profile.rent_is_max_housing_payment and record.rent_amount:
            values["max_housing_payment"] = clean_currency(record.rent_amount)

        return ClientPayload(values=values, defaulted=frozenset(defaulted))

    def _merge(self, existing: Client, payload: ClientPayload) -> dict[str, Any]:
        if self.merge_strategy is MergeStrategy.OVERWRITE:
            return dict(payload.values)

        merged: dict[str, Any] = {}
        for key, value in payload.values.items():
            if key in payload.defaulted and getattr(existing, key) not in (None, ""):
                continue
            merged[key] = value

        # статус всегда соответствует заметкам, которые останутся у клиента
        inactive = notes_mark_inactive(merged.get("notes", existing.notes))
        merged["status"] = (ClientStatus.INACTIVE if inactive else ClientStatus.ACTIVE).value
        merged["is_active"] = not inactive
        return merged
