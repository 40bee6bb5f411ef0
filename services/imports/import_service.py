"""Импорт клиентов из табличных выгрузок округа, CSV и Excel.

Два входа:

* :func:`import_file` — текст с табуляцией, одна строка на клиента,
  позиционные колонки описаны в профиле (:data:`RAMSEY`, :data:`DAKOTA`);
* :func:`import_csv` / :func:`import_client_table` — файл с заголовком
  (:data:`CSV_COLUMNS`), CSV/TSV или Excel.

Записи обрабатываются строго по очереди. Каждая запись пишется в своей
транзакции; поведение при ошибке строки задаёт :class:`FailurePolicy`.
"""

from __future__ import annotations

import io
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Mapping

import pandas as pd

from database.db import db
from database.models import Company

from .cache import ImportCache
from .client_upserter import ClientUpserter, MergeStrategy
from .dto import (
    ClientRecord,
    CsvParseResult,
    ImportSummary,
    RowError,
    RowWarning,
)
from .entity_resolver import EntityResolver
from .policies import LayoutPolicy, estimate_layout_from_rent
from .profiles import GENERIC, RAMSEY, CountyProfile

logger = logging.getLogger(__name__)

CSV_COLUMNS = (
    "Case Number",
    "Client Name",
    "Client Number",
    "Client Address",
    "Properties Management",
    "County",
    "Cell Number",
    "Email",
    "Comment",
    "Rental Office Address",
    "Rent Amount",
    "County Amount",
    "Notes",
)


class FailurePolicy(str, Enum):
    """Что делать, если запись упала с исключением.

    ``ISOLATE`` — записать ошибку, посчитать строку пропущенной и идти
    дальше. ``ABORT`` — остановить прогон и вернуть сводку с ``error``;
    уже записанные строки остаются в базе.
    """

    ISOLATE = "isolate"
    ABORT = "abort"


# ──────────────────────────── Разбор строк ─────────────────────────────


def parse_tab_line(line: str, profile: CountyProfile = RAMSEY) -> ClientRecord | None:
    """Разобрать строку табличной выгрузки округа.

    Возвращает ``None`` для пустой строки, строки заголовка и строки, в
    которой нет обязательных колонок профиля.
    """
    if not profile.columns:
        raise ValueError(f"Профиль '{profile.key}' не описывает табличный формат")
    if not line.strip() or profile.is_header(line):
        return None

    fields = [part.strip() for part in line.split("\t")]
    row = dict(zip(profile.columns, fields))
    if any(not row.get(column) for column in profile.required_columns):
        return None

    office_address = row.get("rental_office_address", "")
    return ClientRecord.from_full_name(
        row["client_name"],
        case_number=row.get("case_number", ""),
        management_name=row.get("properties", ""),
        rental_office_address=office_address,
        # в выгрузках округа адрес клиента — это адрес арендного офиса
        current_address=office_address,
        rent_amount=row.get("rent_amount") or None,
        county_amount=row.get("county_amount") or None,
        notes=row.get("notes") or None,
    )


def record_from_csv_row(row: Mapping[str, Any]) -> ClientRecord:
    """Преобразовать строку CSV с заголовком в :class:`ClientRecord`."""

    def get(column: str) -> str:
        value = row.get(column)
        return str(value).strip() if value is not None else ""

    return ClientRecord.from_full_name(
        get("Client Name"),
        case_number=get("Case Number"),
        phone=get("Client Number") or get("Cell Number"),
        email=get("Email"),
        current_address=get("Client Address"),
        management_name=get("Properties Management"),
        county=get("County"),
        rental_office_address=get("Rental Office Address"),
        rent_amount=get("Rent Amount") or None,
        county_amount=get("County Amount") or None,
        notes=get("Notes") or None,
        comments=get("Comment") or None,
    )


def _records_from_frame(df: pd.DataFrame) -> CsvParseResult:
    df = df.fillna("").astype(str)
    df.columns = [str(c).strip() for c in df.columns]
    if "Client Name" not in df.columns:
        return CsvParseResult(False, error="CSV parsing errors: нет колонки 'Client Name'")
    for column in df.columns:
        df[column] = df[column].str.strip()
    records = [record_from_csv_row(row) for row in df.to_dict("records")]
    return CsvParseResult(True, records=records)


def parse_csv_text(text: str, *, delimiter: str = ",") -> CsvParseResult:
    """Разобрать CSV с заголовком; при ошибке формата вернуть ``success=False``."""
    try:
        df = pd.read_csv(
            io.StringIO(text),
            sep=delimiter,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        logger.warning("⚠️ Ошибка разбора CSV: %s", exc)
        return CsvParseResult(False, error=f"CSV parsing errors: {exc}")
    return _records_from_frame(df)


def load_client_table(path: str | Path, *, delimiter: str | None = None) -> CsvParseResult:
    """Загрузить таблицу клиентов из ``.csv``, ``.tsv``/``.txt`` или Excel."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in (".xlsx", ".xls"):
        try:
            df = pd.read_excel(path, dtype=str)
        except ValueError as exc:
            logger.warning("⚠️ Ошибка чтения Excel %s: %s", path, exc)
            return CsvParseResult(False, error=f"Excel parsing failed: {exc}")
        return _records_from_frame(df)

    sep = delimiter or ("\t" if suffix in (".tsv", ".txt") else ",")
    return parse_csv_text(path.read_text(encoding="utf-8-sig"), delimiter=sep)


# ──────────────────────────── Прогон записей ─────────────────────────────


def _build_upserter(
    company_id: int,
    *,
    profile: CountyProfile,
    cache: ImportCache | None,
    merge_strategy: MergeStrategy,
    legacy_name_match: bool,
    layout_policy: LayoutPolicy | None,
) -> ClientUpserter:
    if Company.get_or_none(Company.id == company_id) is None:
        raise ValueError(f"Компания id={company_id} не найдена")
    resolver = EntityResolver(
        company_id,
        profile=profile,
        cache=cache,
        layout_policy=layout_policy or estimate_layout_from_rent,
        legacy_name_match=legacy_name_match,
    )
    return ClientUpserter(
        company_id, resolver, profile=profile, merge_strategy=merge_strategy
    )


def _run(
    rows: Iterable[tuple[int, ClientRecord | None, dict[str, Any]]],
    upserter: ClientUpserter,
    failure_policy: FailurePolicy,
) -> ImportSummary:
    summary = ImportSummary()
    cache = upserter.resolver.cache
    failure_policy = FailurePolicy(failure_policy)

    for row_number, record, data in rows:
        if record is None:
            summary.skipped += 1
            if data:
                summary.warnings.append(
                    RowWarning(
                        row_number,
                        "Строка пропущена: заголовок или нет обязательных полей",
                        data,
                    )
                )
            continue

        snapshot = cache.snapshot()
        try:
            with db.atomic():
                result = upserter.upsert(record)
        except Exception as exc:
            cache.restore(snapshot)
            logger.exception(
                "❌ Ошибка обработки строки %s (%s)", row_number, record.display_name
            )
            summary.errors.append(RowError(row_number, str(exc), record.to_dict()))
            if failure_policy is FailurePolicy.ABORT:
                summary.error = f"Database processing failed at row {row_number}: {exc}"
                return summary
            summary.skipped += 1
            continue

        if result.skipped:
            summary.skipped += 1
            summary.warnings.append(
                RowWarning(row_number, result.reason or "", record.to_dict())
            )
            continue

        summary.processed += 1
        summary.add_result(result)

    return summary


def _log_summary(title: str, summary: ImportSummary) -> None:
    logger.info(
        "📊 %s: обработано %s, создано %s, обновлено %s, пропущено %s "
        "(зданий +%s, объектов +%s)",
        title,
        summary.processed,
        summary.created,
        summary.updated,
        summary.skipped,
        summary.buildings_created,
        summary.properties_created,
    )


def import_tab_text(
    text: str,
    company_id: int,
    *,
    profile: CountyProfile = RAMSEY,
    cache: ImportCache | None = None,
    merge_strategy: MergeStrategy = MergeStrategy.OVERWRITE,
    failure_policy: FailurePolicy = FailurePolicy.ISOLATE,
    legacy_name_match: bool = False,
    layout_policy: LayoutPolicy | None = None,
) -> ImportSummary:
    """Импортировать текст табличной выгрузки (см. :func:`import_file`)."""
    upserter = _build_upserter(
        company_id,
        profile=profile,
        cache=cache,
        merge_strategy=merge_strategy,
        legacy_name_match=legacy_name_match,
        layout_policy=layout_policy,
    )
    lines = text.splitlines()
    logger.info("📥 Импорт выгрузки '%s': %s строк", profile.key, len(lines))

    def rows():
        for number, line in enumerate(lines, start=1):
            data = {"line": line[:100]} if line.strip() else {}
            yield number, parse_tab_line(line, profile), data

    summary = _run(rows(), upserter, failure_policy)
    _log_summary(f"Импорт выгрузки '{profile.key}' завершён", summary)
    return summary


def import_file(
    path: str | Path,
    company_id: int,
    **kwargs: Any,
) -> ImportSummary:
    """Импортировать файл табличной выгрузки округа.

    Пустые строки, строка заголовка и строки без обязательных колонок
    считаются пропущенными. По умолчанию ошибки строки изолируются
    (:attr:`FailurePolicy.ISOLATE`), а найденный клиент перезаписывается
    целиком (:attr:`MergeStrategy.OVERWRITE`).
    """
    text = Path(path).read_text(encoding="utf-8-sig")
    return import_tab_text(text, company_id, **kwargs)


def process_csv_records(
    records: Iterable[ClientRecord],
    company_id: int,
    *,
    profile: CountyProfile = GENERIC,
    cache: ImportCache | None = None,
    merge_strategy: MergeStrategy = MergeStrategy.COALESCE_EMPTY,
    failure_policy: FailurePolicy = FailurePolicy.ABORT,
    legacy_name_match: bool = False,
    layout_policy: LayoutPolicy | None = None,
) -> ImportSummary:
    """Записать разобранные строки CSV в базу.

    По умолчанию первая ошибка записи останавливает прогон
    (:attr:`FailurePolicy.ABORT`), а у найденного клиента сохраняются поля,
    которых нет в файле (:attr:`MergeStrategy.COALESCE_EMPTY`).
    """
    upserter = _build_upserter(
        company_id,
        profile=profile,
        cache=cache,
        merge_strategy=merge_strategy,
        legacy_name_match=legacy_name_match,
        layout_policy=layout_policy,
    )
    rows = ((number, record, {}) for number, record in enumerate(records, start=1))
    summary = _run(rows, upserter, failure_policy)
    _log_summary("Импорт CSV завершён", summary)
    return summary


def import_csv(
    text: str,
    company_id: int,
    *,
    delimiter: str = ",",
    **kwargs: Any,
) -> ImportSummary:
    """Разобрать CSV-текст и записать его; ошибка разбора → ``summary.error``."""
    parsed = parse_csv_text(text, delimiter=delimiter)
    if not parsed.success:
        return ImportSummary(error=parsed.error)
    return process_csv_records(parsed.records, company_id, **kwargs)


def import_client_table(
    path: str | Path,
    company_id: int,
    *,
    delimiter: str | None = None,
    **kwargs: Any,
) -> ImportSummary:
    """Загрузить CSV/TSV/Excel с заголовком и записать его."""
    parsed = load_client_table(path, delimiter=delimiter)
    if not parsed.success:
        return ImportSummary(error=parsed.error)
    return process_csv_records(parsed.records, company_id, **kwargs)
