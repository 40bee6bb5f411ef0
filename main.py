import argparse
import json
import logging

from config import Settings, get_settings
from database.init import create_schema, init_from_env
from services import pool_fund_service as pool_svc
from services.imports import (
    FailurePolicy,
    MergeStrategy,
    get_profile,
    import_client_table,
    import_file,
)
from utils.logging_config import setup_logging
from utils.money import format_usd

__all__ = ["build_parser", "main"]

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="housing-import",
        description="Импорт клиентов, зданий и объектов из выгрузок округа",
    )
    parser.add_argument(
        "--company-id", type=int, default=None, help="ID компании (по умолчанию из .env)"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="создать таблицы")

    tab = sub.add_parser("import-tab", help="табличная выгрузка округа (TAB)")
    tab.add_argument("path")
    tab.add_argument("--profile", choices=("ramsey", "dakota"), default="ramsey")
    tab.add_argument("--legacy-name-match", action="store_true")
    tab.add_argument("--abort-on-error", action="store_true")

    csv = sub.add_parser("import-csv", help="CSV/TSV/Excel с заголовком")
    csv.add_argument("path")
    merge = csv.add_mutually_exclusive_group()
    merge.add_argument(
        "--coalesce",
        dest="merge_strategy",
        action="store_const",
        const=MergeStrategy.COALESCE_EMPTY,
    )
    merge.add_argument(
        "--overwrite",
        dest="merge_strategy",
        action="store_const",
        const=MergeStrategy.OVERWRITE,
    )
    csv.set_defaults(merge_strategy=MergeStrategy.COALESCE_EMPTY)

    sub.add_parser("pool-fund", help="баланс фонда по округам")
    return parser


def _print_pool_fund() -> None:
    summaries = pool_svc.get_summary_by_county()
    if not summaries:
        print("Фонд пуст")
        return
    for item in summaries:
        print(
            f"{item.county:<20} {format_usd(item.balance):>14}  "
            f"(+{format_usd(item.total_deposits)} / -{format_usd(item.total_withdrawals)}, "
            f"записей: {item.entry_count})"
        )
    print(f"{'Итого':<20} {format_usd(pool_svc.get_balance()):>14}")


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    """Точка входа CLI."""

    args = build_parser().parse_args(argv)
    settings = settings or get_settings()
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL не задан в .env")

    init_from_env(settings.database_url)
    setup_logging(settings)
    create_schema()

    company_id = args.company_id or settings.default_company_id

    if args.command == "init-db":
        return 0
    if args.command == "pool-fund":
        _print_pool_fund()
        return 0

    if args.command == "import-tab":
        summary = import_file(
            args.path,
            company_id,
            profile=get_profile(args.profile),
            legacy_name_match=args.legacy_name_match,
            failure_policy=(
                FailurePolicy.ABORT if args.abort_on_error else FailurePolicy.ISOLATE
            ),
        )
    else:
        summary = import_client_table(
            args.path, company_id, merge_strategy=args.merge_strategy
        )

    print(json.dumps(summary.to_dict(), ensure_ascii=False, indent=2))
    if not summary.success:
        logger.error("❌ Импорт остановлен: %s", summary.error)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
