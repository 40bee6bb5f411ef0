"""Поиск и создание зданий и объектов для импортируемых клиентов."""

from __future__ import annotations

import logging
from decimal import Decimal

from database.models import Building, Property
from services.validators import clean_currency

from .cache import ImportCache
from .dto import Resolution
from .policies import (
    DEFAULT_RENT,
    LayoutPolicy,
    estimate_layout_from_rent,
    single_unit_layout,
)
from .profiles import GENERIC, PLACEHOLDER_EMAIL, CountyProfile

logger = logging.getLogger(__name__)


class EntityResolver:
    """Находит или создаёт пару «здание + объект» по управляющей компании.

    По умолчанию здание ищется по ``(название, адрес, компания)``, объект —
    по ``(название, здание, компания)``, а решения запоминаются в
    :class:`ImportCache`. Повторный прогон того же файла ничего нового не
    создаёт.

    При ``legacy_name_match=True`` повторяется старый алгоритм выгрузок
    округа: поиск только по названию здания (адрес и компания не
    учитываются), а при промахе по объекту всегда создаётся новый
    ``"<название> - Unit 1"``.
    """

    def __init__(
        self,
        company_id: int,
        *,
        profile: CountyProfile = GENERIC,
        cache: ImportCache | None = None,
        layout_policy: LayoutPolicy = estimate_layout_from_rent,
        legacy_name_match: bool = False,
    ) -> None:
        self.company_id = company_id
        self.profile = profile
        self.cache = cache if cache is not None else ImportCache()
        self.layout_policy = layout_policy
        self.legacy_name_match = legacy_name_match

    def resolve(
        self,
        management_name: str | None,
        office_address: str | None = "",
        rent_amount: str | None = None,
        contact_email: str | None = None,
    ) -> Resolution | None:
        """Вернуть :class:`Resolution` или ``None``, если здания нет в строке."""
        name = (management_name or "").strip()
        if not name or name in self.profile.ignored_management_names:
            return None
        address = (office_address or "").strip()

        if self.legacy_name_match:
            return self._resolve_by_name(name, address)

        building_id, building_created = self._find_or_create_building(
            name, address, contact_email
        )
        property_id, property_created = self._find_or_create_property(
            name, building_id, rent_amount
        )
        return Resolution(
            building_id=building_id,
            property_id=property_id,
            building_created=building_created,
            property_created=property_created,
        )

    # ──────────────────────────── Здания ─────────────────────────────

    def _find_or_create_building(
        self, name: str, address: str, contact_email: str | None
    ) -> tuple[int, bool]:
        key = (name, address, self.company_id)
        cached = self.cache.get_building(key)
        if cached is not None:
            return cached, False

        existing = Building.get_or_none(
            (Building.name == name)
            & (Building.address == address)
            & (Building.company == self.company_id)
        )
        if existing:
            self.cache.remember_building(key, existing.id)
            return existing.id, False

        building = self._create_building(
            name,
            address,
            landlord_email=self.profile.landlord_email or contact_email or PLACEHOLDER_EMAIL,
        )
        self.cache.remember_building(key, building.id)
        return building.id, True

    def _create_building(self, name: str, address: str, *, landlord_email: str) -> Building:
        building = Building.create(
            company=self.company_id,
            name=name,
            address=address,
            landlord_name=name,
            landlord_phone=self.profile.landlord_phone,
            landlord_email=landlord_email,
            total_units=1,
            building_type="apartment",
            property_manager=name,
            status="active",
        )
        logger.info("🏢 Здание id=%s: %s (%s) создано", building.id, name, address or "—")
        return building

    # ──────────────────────────── Объекты ────────────────────────────

    def _find_or_create_property(
        self, name: str, building_id: int, rent_amount: str | None
    ) -> tuple[int, bool]:
        key = (name, building_id, self.company_id)
        cached = self.cache.get_property(key)
        if cached is not None:
            return cached, False

        existing = Property.get_or_none(
            (Property.name == name)
            & (Property.building == building_id)
            & (Property.company == self.company_id)
        )
        if existing:
            self.cache.remember_property(key, existing.id)
            return existing.id, False

        rent = Decimal(clean_currency(rent_amount))
        if not rent:
            rent = DEFAULT_RENT
        layout = self.layout_policy(rent)
        unit = Property.create(
            company=self.company_id,
            building=building_id,
            name=name,
            unit_number="1",
            rent_amount=rent,
            deposit_amount=rent,
            bedrooms=layout.bedrooms,
            bathrooms=layout.bathrooms,
            square_footage=layout.square_footage,
            status=self.profile.unit_status,
        )
        logger.info(
            "🏠 Объект id=%s: %s создан в здании id=%s", unit.id, name, building_id
        )
        self.cache.remember_property(key, unit.id)
        return unit.id, True

    # ─────────────────────── Старый поиск по имени ───────────────────────

    def _resolve_by_name(self, name: str, address: str) -> Resolution:
        existing = (
            Property.select()
            .join(Building)
            .where(Building.name == name)
            .order_by(Property.id)
            .first()
        )
        if existing:
            return Resolution(building_id=existing.building_id, property_id=existing.id)

        building = (
            Building.select().where(Building.name == name).order_by(Building.id).first()
        )
        building_created = building is None
        if building is None:
            building = self._create_building(
                name,
                address,
                landlord_email=self.profile.landlord_email or PLACEHOLDER_EMAIL,
            )

        layout = single_unit_layout(Decimal("0"))
        unit = Property.create(
            company=self.company_id,
            building=building.id,
            name=f"{name} - Unit 1",
            unit_number="1",
            rent_amount=Decimal("0.00"),
            deposit_amount=Decimal("0.00"),
            bedrooms=layout.bedrooms,
            bathrooms=layout.bathrooms,
            square_footage=layout.square_footage,
            status=self.profile.unit_status,
        )
        logger.info(
            "🏠 Объект id=%s: %s - Unit 1 создан в здании id=%s",
            unit.id,
            name,
            building.id,
        )
        return Resolution(
            building_id=building.id,
            property_id=unit.id,
            building_created=building_created,
            property_created=True,
        )
