"""Импорт клиентов, зданий и объектов из выгрузок округа и CSV/Excel.

Пакет переэкспортирует точки входа из
``services.imports.import_service`` и основные типы, чтобы внешний код
мог писать ``from services.imports import import_file``.
"""

from .cache import ImportCache
from .client_upserter import ClientUpserter, MergeStrategy
from .dto import (
    ClientRecord,
    CsvParseResult,
    ImportSummary,
    Resolution,
    RowError,
    RowWarning,
    UpsertResult,
)
from .entity_resolver import EntityResolver
from .import_service import (
    CSV_COLUMNS,
    FailurePolicy,
    import_client_table,
    import_csv,
    import_file,
    import_tab_text,
    load_client_table,
    parse_csv_text,
    parse_tab_line,
    process_csv_records,
    record_from_csv_row,
)
from .policies import UnitLayout, estimate_layout_from_rent, single_unit_layout
from .profiles import DAKOTA, GENERIC, RAMSEY, CountyProfile, get_profile

__all__ = [
    "ImportCache",
    "ClientUpserter",
    "MergeStrategy",
    "ClientRecord",
    "CsvParseResult",
    "ImportSummary",
    "Resolution",
    "RowError",
    "RowWarning",
    "UpsertResult",
    "EntityResolver",
    "CSV_COLUMNS",
    "FailurePolicy",
    "import_client_table",
    "import_csv",
    "import_file",
    "import_tab_text",
    "load_client_table",
    "parse_csv_text",
    "parse_tab_line",
    "process_csv_records",
    "record_from_csv_row",
    "UnitLayout",
    "estimate_layout_from_rent",
    "single_unit_layout",
    "DAKOTA",
    "GENERIC",
    "RAMSEY",
    "CountyProfile",
    "get_profile",
]
