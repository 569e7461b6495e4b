"""Base metadata loader interface and registry for database dialects."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

from gen_core.errors import LoadError
from gen_core.meta import ColumnMeta, DbTableMeta, build_default_table_ddl, primary_key_position

logger = logging.getLogger(__name__)

_DECLARED_TYPE_RE = re.compile(r"^([^(]*)\(([^)]*)\)(.*)$")

_TABLE_CONSTRAINT_PREFIXES = ("constraint", "primary", "unique", "check", "foreign", "key", "index", "fulltext", "spatial")


def _text(value: Any) -> str:
    """Catalog values may arrive as bytes from some drivers."""
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return str(value)


def _int(value: Any) -> int:
    if value in (None, ""):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def parse_declared_type(declared: str) -> Tuple[str, int]:
    """Split ``VARCHAR(255)`` into ``("varchar", 255)``.

    Any text after the parameter list (``int(10) unsigned``) stays part of
    the type name.
    """
    value = (declared or "").strip().lower()
    m = _DECLARED_TYPE_RE.match(value)
    if not m:
        return " ".join(value.split()), 0
    base = " ".join(f"{m.group(1)} {m.group(3)}".split())
    return base, _int(m.group(2).split(",")[0].strip())


def split_schema(table_name: str, default_schema: str) -> Tuple[str, str]:
    if "." in table_name:
        schema, _, table = table_name.partition(".")
        return schema.strip('"[]'), table.strip('"[]')
    return default_schema, table_name


def column_ddl_fragments(ddl: str) -> Dict[str, str]:
    """Map lower-cased column names to their definition inside a CREATE TABLE."""
    start = ddl.find("(")
    end = ddl.rfind(")")
    if start < 0 or end <= start:
        return {}

    body = ddl[start + 1:end]
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for char in body:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))

    fragments: Dict[str, str] = {}
    for part in parts:
        fragment = " ".join(part.split())
        if not fragment:
            continue
        first = fragment.split(" ", 1)[0]
        if first.lower() in _TABLE_CONSTRAINT_PREFIXES:
            continue
        name = first.strip('`"[]').lower()
        fragments[name] = fragment
    return fragments


class MetadataLoader(ABC):
    """Loads normalized DbTableMeta for one table from a live connection.

    Subclasses only differ in the catalog queries they issue; the returned
    metadata has the same shape for every engine. Loaders never open, commit
    or close the connection they are given.
    """

    sql_types: Tuple[str, ...] = ()
    display_name: str = ""

    def load(self, conn: Any, sql_type: str, sql_database: str, table_name: str) -> DbTableMeta:
        try:
            meta = self._load(conn, sql_type, sql_database, table_name)
        except LoadError:
            raise
        except Exception as exc:
            raise LoadError(sql_type, sql_database, table_name, str(exc)) from exc

        logger.debug("Loaded %s table %s with %d columns", sql_type, table_name, len(meta.columns))
        for column in meta.columns:
            logger.debug("    %s", column)
        return meta

    def table_names(self, conn: Any, sql_database: str) -> List[str]:
        try:
            return self._table_names(conn, sql_database)
        except LoadError:
            raise
        except Exception as exc:
            raise LoadError(self.display_name, sql_database, "*", str(exc)) from exc

    @abstractmethod
    def _load(self, conn: Any, sql_type: str, sql_database: str, table_name: str) -> DbTableMeta:
        """Issue the catalog queries and build the table metadata."""

    @abstractmethod
    def _table_names(self, conn: Any, sql_database: str) -> List[str]:
        """List user tables visible in the database."""

    def _query(self, conn: Any, sql: str, params: Optional[Sequence[Any]] = None) -> List[Tuple[Any, ...]]:
        cur = conn.cursor()
        try:
            if params is None:
                cur.execute(sql)
            else:
                cur.execute(sql, tuple(params))
            return [tuple(row) for row in cur.fetchall()]
        finally:
            cur.close()

    def _assemble(
        self,
        sql_type: str,
        sql_database: str,
        table_name: str,
        columns: List[ColumnMeta],
        ddl: str = "",
    ) -> DbTableMeta:
        return DbTableMeta(
            sql_type=sql_type,
            sql_database=sql_database,
            table_name=table_name,
            columns=tuple(columns),
            ddl=ddl or build_default_table_ddl(table_name, columns),
            primary_key_pos=primary_key_position(columns),
        )

    @staticmethod
    def _require_columns(rows: Sequence[Any], sql_type: str, sql_database: str, table_name: str) -> None:
        if not rows:
            raise LoadError(sql_type, sql_database, table_name, "table not found or has no columns")

    @staticmethod
    def _check_primary_keys(
        primary_keys: Sequence[str],
        column_names: Sequence[str],
        sql_type: str,
        sql_database: str,
        table_name: str,
    ) -> None:
        # Catalog queries are not isolated; a key on a vanished column means
        # the table changed between queries.
        missing = [name for name in primary_keys if name not in column_names]
        if missing:
            raise LoadError(
                sql_type,
                sql_database,
                table_name,
                f"primary key column(s) {', '.join(missing)} missing from column set",
            )


# ---------------------------------------------------------------------------
# Loader registry
# ---------------------------------------------------------------------------

_REGISTRY: Dict[str, MetadataLoader] = {}
_FALLBACK: Optional[MetadataLoader] = None


def _register(loader: MetadataLoader) -> None:
    for sql_type in loader.sql_types:
        _REGISTRY[sql_type] = loader


def get_loader(sql_type: str) -> MetadataLoader:
    """Get the loader for an engine id, or the fallback loader if unregistered."""
    loader = _REGISTRY.get(sql_type.lower())
    if loader is None:
        logger.debug("No loader registered for %s, using %s", sql_type, type(_FALLBACK).__name__)
        return _FALLBACK
    return loader


def is_registered(sql_type: str) -> bool:
    return sql_type.lower() in _REGISTRY


def list_loaders() -> List[Dict[str, str]]:
    """List all registered engine ids."""
    return [
        {"type": name, "name": loader.display_name, "loader": type(loader).__name__}
        for name, loader in sorted(_REGISTRY.items())
    ]


def load_meta(conn: Any, sql_type: str, sql_database: str, table_name: str) -> DbTableMeta:
    """Load DbTableMeta for a table using the loader registered for ``sql_type``."""
    return get_loader(sql_type).load(conn, sql_type, sql_database, table_name)


def register_all() -> None:
    """Register all built-in loaders."""
    global _FALLBACK

    from gen_core.loaders.mssql import MsSqlLoader
    from gen_core.loaders.mysql import MysqlLoader
    from gen_core.loaders.postgres import PostgresLoader
    from gen_core.loaders.sqlite import SqliteLoader
    from gen_core.loaders.unknown import UnknownLoader

    for cls in [
        SqliteLoader,
        MysqlLoader,
        PostgresLoader,
        MsSqlLoader,
    ]:
        _register(cls())

    _FALLBACK = UnknownLoader()


register_all()
