"""Кэш решений одного прогона импорта."""

from __future__ import annotations

from dataclasses import dataclass, field

BuildingKey = tuple[str, str, int]
PropertyKey = tuple[str, int, int]


@dataclass
class ImportCache:
    """Запоминает уже найденные или созданные здания и объекты.

    Ключи здания — ``(название, адрес, company_id)``, объекта —
    ``(название, building_id, company_id)``. Кэш живёт один прогон; его
    можно передать заранее заполненным.
    """

    buildings: dict[BuildingKey, int] = field(default_factory=dict)
    properties: dict[PropertyKey, int] = field(default_factory=dict)

    def get_building(self, key: BuildingKey) -> int | None:
        return self.buildings.get(key)

    def remember_building(self, key: BuildingKey, building_id: int) -> None:
        self.buildings[key] = building_id

    def get_property(self, key: PropertyKey) -> int | None:
        return self.properties.get(key)

    def remember_property(self, key: PropertyKey, property_id: int) -> None:
        self.properties[key] = property_id

    def snapshot(self) -> tuple[dict, dict]:
        return dict(self.buildings), dict(self.properties)

    def restore(self, snapshot: tuple[dict, dict]) -> None:
        """Откатить кэш к снимку (после отката транзакции записи)."""
        buildings, properties = snapshot
        self.buildings = dict(buildings)
        self.properties = dict(properties)

    def __len__(self) -> int:
        return len(self.buildings) + len(self.properties)
