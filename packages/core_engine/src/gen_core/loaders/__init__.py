"""Dialect metadata loaders for pulling table metadata from live databases.

Each loader implements the same interface:
  load(conn, sql_type, sql_database, table_name) -> DbTableMeta

Engines without a registered loader get the UnknownLoader fallback.
"""

from gen_core.loaders.base import (
    MetadataLoader,
    get_loader,
    is_registered,
    list_loaders,
    load_meta,
)
from gen_core.loaders.mssql import MsSqlLoader
from gen_core.loaders.mysql import MysqlLoader
from gen_core.loaders.postgres import PostgresLoader
from gen_core.loaders.sqlite import SqliteLoader
from gen_core.loaders.unknown import UnknownLoader

__all__ = [
    "MetadataLoader",
    "MsSqlLoader",
    "MysqlLoader",
    "PostgresLoader",
    "SqliteLoader",
    "UnknownLoader",
    "get_loader",
    "is_registered",
    "list_loaders",
    "load_meta",
]
