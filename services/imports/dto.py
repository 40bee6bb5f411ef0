"""DTO импорта клиентов: нормализованная запись, результаты и сводка."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from services.validators import parse_client_name


@dataclass(frozen=True)
class ClientRecord:
    """Нормализованная строка источника, готовая к upsert'у."""

    first_name: str
    last_name: str
    management_name: str = ""
    rental_office_address: str = ""
    case_number: str = ""
    phone: str = ""
    email: str = ""
    current_address: str = ""
    county: str = ""
    rent_amount: str | None = None
    county_amount: str | None = None
    notes: str | None = None
    comments: str | None = None
    source_name: str = ""

    @classmethod
    def from_full_name(cls, full_name: str, **kwargs: Any) -> "ClientRecord":
        first_name, last_name = parse_client_name(full_name)
        return cls(
            first_name=first_name,
            last_name=last_name,
            source_name=(full_name or "").strip(),
            **kwargs,
        )

    @property
    def display_name(self) -> str:
        return self.source_name or f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Resolution:
    """Здание и объект, к которым привязывается клиент."""

    building_id: int
    property_id: int
    building_created: bool = False
    property_created: bool = False


@dataclass(frozen=True)
class UpsertResult:
    outcome: str  # created | updated | skipped
    client_id: int | None = None
    resolution: Resolution | None = None
    reason: str | None = None

    @property
    def skipped(self) -> bool:
        return self.outcome == "skipped"


@dataclass
class RowError:
    row: int
    error: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class RowWarning:
    row: int
    message: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class ImportSummary:
    processed: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    buildings_created: int = 0
    properties_created: int = 0
    errors: list[RowError] = field(default_factory=list)
    warnings: list[RowWarning] = field(default_factory=list)
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def clients_created(self) -> int:
        return self.created

    def add_result(self, result: UpsertResult) -> None:
        if result.outcome == "created":
            self.created += 1
        elif result.outcome == "updated":
            self.updated += 1
        if result.resolution is not None:
            self.buildings_created += int(result.resolution.building_created)
            self.properties_created += int(result.resolution.property_created)

    def to_dict(self) -> dict[str, Any]:
        """Словарь для внешних обработчиков (HTTP, CLI)."""
        return {
            "success": self.success,
            "processed": self.processed,
            "created": self.created,
            "updated": self.updated,
            "skipped": self.skipped,
            "clientsCreated": self.clients_created,
            "propertiesCreated": self.properties_created,
            "buildingsCreated": self.buildings_created,
            "errorDetails": [asdict(e) for e in self.errors],
            "warnings": [asdict(w) for w in self.warnings],
            "error": self.error,
        }


@dataclass
class CsvParseResult:
    success: bool
    records: list[ClientRecord] = field(default_factory=list)
    error: str | None = None
