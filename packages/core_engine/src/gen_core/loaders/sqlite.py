"""SQLite loader: reads PRAGMA table_info and the stored CREATE TABLE text."""

from __future__ import annotations

from typing import Any, List

from gen_core.loaders.base import MetadataLoader, _text, column_ddl_fragments, parse_declared_type
from gen_core.meta import ColumnMeta, DbTableMeta


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


class SqliteLoader(MetadataLoader):
    sql_types = ("sqlite3", "sqlite")
    display_name = "SQLite"

    def _table_names(self, conn: Any, sql_database: str) -> List[str]:
        rows = self._query(
            conn,
            """
            SELECT name FROM sqlite_master
            WHERE type = 'table' AND name NOT LIKE 'sqlite_%'
            ORDER BY name
            """,
        )
        return [_text(row[0]) for row in rows]

    def _load(self, conn: Any, sql_type: str, sql_database: str, table_name: str) -> DbTableMeta:
        # cid, name, type, notnull, dflt_value, pk
        rows = self._query(conn, f"PRAGMA table_info({_quote(table_name)})")
        self._require_columns(rows, sql_type, sql_database, table_name)

        ddl_rows = self._query(
            conn,
            "SELECT sql FROM sqlite_master WHERE type = 'table' AND name = ?",
            (table_name,),
        )
        ddl = _text(ddl_rows[0][0]) if ddl_rows else ""
        fragments = column_ddl_fragments(ddl)

        key_count = sum(1 for row in rows if row[5])
        columns: List[ColumnMeta] = []
        for i, (_cid, name, declared, notnull, default, pk) in enumerate(rows):
            name = _text(name)
            column_type, length = parse_declared_type(_text(declared))
            fragment = fragments.get(name.lower(), "")
            is_primary_key = bool(pk)

            # A lone INTEGER PRIMARY KEY aliases the rowid and is auto-assigned.
            is_auto_increment = "autoincrement" in fragment.lower() or (
                is_primary_key and key_count == 1 and column_type == "integer"
            )

            notes = ""
            if not column_type:
                notes = f"column {name} has no declared type"

            columns.append(
                ColumnMeta(
                    index=i,
                    name=name,
                    database_type_name=column_type,
                    column_type=column_type,
                    column_length=length,
                    nullable=not notnull,
                    is_primary_key=is_primary_key,
                    is_auto_increment=is_auto_increment,
                    default_value=_text(default),
                    notes=notes,
                    col_ddl=fragment,
                )
            )

        return self._assemble(sql_type, sql_database, table_name, columns, ddl)
