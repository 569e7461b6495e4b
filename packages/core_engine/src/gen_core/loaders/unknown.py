"""Fallback loader for engines without a registered dialect."""

from __future__ import annotations

from typing import Any, List

from gen_core.errors import LoadError
from gen_core.loaders.base import MetadataLoader
from gen_core.meta import ColumnMeta, DbTableMeta


def _quote(table_name: str) -> str:
    """ANSI-quote each part of an optionally schema-qualified name."""
    return ".".join('"' + part.replace('"', '""') + '"' for part in table_name.split("."))


def _type_name(type_code: Any) -> str:
    if type_code is None:
        return ""
    if isinstance(type_code, str):
        return type_code.lower()
    if isinstance(type_code, type):
        return type_code.__name__.lower()
    return str(type_code).lower()


class UnknownLoader(MetadataLoader):
    """Best-effort introspection from DB-API ``cursor.description`` only.

    Auto-increment, defaults, lengths and key membership cannot be known
    without an engine catalog and are left empty.
    """

    display_name = "Unknown"

    def _table_names(self, conn: Any, sql_database: str) -> List[str]:
        raise LoadError(self.display_name, sql_database, "*", "listing tables requires a registered dialect")

    def _load(self, conn: Any, sql_type: str, sql_database: str, table_name: str) -> DbTableMeta:
        cur = conn.cursor()
        try:
            cur.execute(f"SELECT * FROM {_quote(table_name)} WHERE 1=0")
            description = list(cur.description or [])
            cur.fetchall()
        finally:
            cur.close()

        self._require_columns(description, sql_type, sql_database, table_name)

        columns: List[ColumnMeta] = []
        for i, entry in enumerate(description):
            # (name, type_code, display_size, internal_size, precision, scale, null_ok)
            type_name = _type_name(entry[1])
            null_ok = entry[6] if len(entry) > 6 else None
            columns.append(
                ColumnMeta(
                    index=i,
                    name=str(entry[0]),
                    database_type_name=type_name,
                    column_type=type_name,
                    nullable=True if null_ok is None else bool(null_ok),
                    notes=f"{sql_type} has no dialect loader; key, default and length are unknown",
                )
            )

        return self._assemble(sql_type, sql_database, table_name, columns)
