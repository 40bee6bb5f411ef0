"""Единое место для Peewee-Proxy `db`.

Реальная база привязывается в :func:`database.init.init_from_env`
(или в тестовой фикстуре ``in_memory_db``).
"""

from peewee import Proxy

db = Proxy()
