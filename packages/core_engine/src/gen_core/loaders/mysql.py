"""MySQL loader: reads information_schema and SHOW CREATE TABLE."""

from __future__ import annotations

from typing import Any, List

from gen_core.loaders.base import MetadataLoader, _int, _text, column_ddl_fragments
from gen_core.meta import ColumnMeta, DbTableMeta


def _quote(identifier: str) -> str:
    return "`" + identifier.replace("`", "``") + "`"


class MysqlLoader(MetadataLoader):
    sql_types = ("mysql",)
    display_name = "MySQL"

    def _table_names(self, conn: Any, sql_database: str) -> List[str]:
        rows = self._query(
            conn,
            """
            SELECT TABLE_NAME
            FROM information_schema.TABLES
            WHERE TABLE_SCHEMA = %s
              AND TABLE_TYPE = 'BASE TABLE'
            ORDER BY TABLE_NAME
            """,
            (sql_database,),
        )
        return [_text(row[0]) for row in rows]

    def _load(self, conn: Any, sql_type: str, sql_database: str, table_name: str) -> DbTableMeta:
        # --- Columns ---
        rows = self._query(
            conn,
            """
            SELECT COLUMN_NAME, DATA_TYPE, COLUMN_TYPE, IS_NULLABLE,
                   COLUMN_DEFAULT, EXTRA, CHARACTER_MAXIMUM_LENGTH,
                   NUMERIC_PRECISION
            FROM information_schema.COLUMNS
            WHERE TABLE_SCHEMA = %s
              AND TABLE_NAME = %s
            ORDER BY ORDINAL_POSITION
            """,
            (sql_database, table_name),
        )
        self._require_columns(rows, sql_type, sql_database, table_name)

        # --- Primary keys ---
        key_rows = self._query(
            conn,
            """
            SELECT COLUMN_NAME
            FROM information_schema.KEY_COLUMN_USAGE
            WHERE TABLE_SCHEMA = %s
              AND TABLE_NAME = %s
              AND CONSTRAINT_NAME = 'PRIMARY'
            ORDER BY ORDINAL_POSITION
            """,
            (sql_database, table_name),
        )
        primary_keys = [_text(row[0]) for row in key_rows]
        self._check_primary_keys(
            primary_keys, [_text(row[0]) for row in rows], sql_type, sql_database, table_name
        )

        # --- DDL ---
        ddl_rows = self._query(conn, f"SHOW CREATE TABLE {_quote(sql_database)}.{_quote(table_name)}")
        ddl = _text(ddl_rows[0][1]) if ddl_rows else ""
        fragments = column_ddl_fragments(ddl)

        columns: List[ColumnMeta] = []
        for i, row in enumerate(rows):
            col_name, data_type, col_type, is_nullable, col_default, extra, char_max_len, num_prec = (
                _text(row[0]), _text(row[1]).lower(), _text(row[2]).lower(), _text(row[3]),
                row[4], _text(row[5]).lower(), row[6], row[7],
            )

            notes = []
            if "unsigned" in col_type:
                notes.append(f"unsigned column {col_name} mapped with signed type {data_type}")
            if data_type in ("enum", "set"):
                notes.append(f"{data_type} column {col_name} values {col_type[len(data_type):]} are not validated")

            length = _int(char_max_len)
            if not length and data_type in ("decimal", "numeric"):
                length = _int(num_prec)

            columns.append(
                ColumnMeta(
                    index=i,
                    name=col_name,
                    database_type_name=data_type,
                    column_type=data_type,
                    column_length=length,
                    nullable=is_nullable.upper() == "YES",
                    is_primary_key=col_name in primary_keys,
                    is_auto_increment="auto_increment" in extra,
                    default_value=_text(col_default),
                    notes="; ".join(notes),
                    col_ddl=fragments.get(col_name.lower(), ""),
                )
            )

        return self._assemble(sql_type, sql_database, table_name, columns, ddl)
