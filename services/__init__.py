"""Пакет прикладных сервисов.

Подмодули на уровне пакета не импортируются, чтобы ``import services``
не тянул pandas. Импортируйте нужное напрямую, например:
    from services import pool_fund_service as pool_svc
    from services.imports import import_file
"""

__all__: list[str] = []
