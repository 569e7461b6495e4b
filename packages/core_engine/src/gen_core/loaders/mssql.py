"""SQL Server loader (INFORMATION_SCHEMA plus COLUMNPROPERTY for identity)."""

from __future__ import annotations

from typing import Any, List

from gen_core.loaders.base import MetadataLoader, _int, _text, split_schema
from gen_core.meta import ColumnMeta, DbTableMeta


class MsSqlLoader(MetadataLoader):
    sql_types = ("mssql", "sqlserver")
    display_name = "SQL Server"
    default_schema = "dbo"

    def _table_names(self, conn: Any, sql_database: str) -> List[str]:
        rows = self._query(
            conn,
            """
            SELECT TABLE_SCHEMA, TABLE_NAME
            FROM INFORMATION_SCHEMA.TABLES
            WHERE TABLE_CATALOG = ?
              AND TABLE_TYPE = 'BASE TABLE'
            ORDER BY TABLE_SCHEMA, TABLE_NAME
            """,
            (sql_database,),
        )
        names = []
        for schema, table in rows:
            schema, table = _text(schema), _text(table)
            names.append(table if schema == self.default_schema else f"{schema}.{table}")
        return names

    def _load(self, conn: Any, sql_type: str, sql_database: str, table_name: str) -> DbTableMeta:
        schema, table = split_schema(table_name, self.default_schema)

        rows = self._query(
            conn,
            """
            SELECT c.COLUMN_NAME, c.DATA_TYPE, c.IS_NULLABLE, c.COLUMN_DEFAULT,
                   c.CHARACTER_MAXIMUM_LENGTH, c.NUMERIC_PRECISION,
                   COLUMNPROPERTY(
                       OBJECT_ID(QUOTENAME(c.TABLE_SCHEMA) + '.' + QUOTENAME(c.TABLE_NAME)),
                       c.COLUMN_NAME, 'IsIdentity'
                   ) AS IS_IDENTITY
            FROM INFORMATION_SCHEMA.COLUMNS c
            WHERE c.TABLE_SCHEMA = ?
              AND c.TABLE_NAME = ?
            ORDER BY c.ORDINAL_POSITION
            """,
            (schema, table),
        )
        self._require_columns(rows, sql_type, sql_database, table_name)

        key_rows = self._query(
            conn,
            """
            SELECT kcu.COLUMN_NAME
            FROM INFORMATION_SCHEMA.TABLE_CONSTRAINTS tc
            JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE kcu
              ON tc.CONSTRAINT_NAME = kcu.CONSTRAINT_NAME
             AND tc.TABLE_SCHEMA = kcu.TABLE_SCHEMA
             AND tc.TABLE_NAME = kcu.TABLE_NAME
            WHERE tc.CONSTRAINT_TYPE = 'PRIMARY KEY'
              AND tc.TABLE_SCHEMA = ?
              AND tc.TABLE_NAME = ?
            ORDER BY kcu.ORDINAL_POSITION
            """,
            (schema, table),
        )
        primary_keys = [_text(row[0]) for row in key_rows]
        self._check_primary_keys(
            primary_keys, [_text(row[0]) for row in rows], sql_type, sql_database, table_name
        )

        columns: List[ColumnMeta] = []
        for i, row in enumerate(rows):
            col_name, data_type, is_nullable, col_default, char_max_len, num_prec, is_identity = row
            col_name = _text(col_name)
            data_type = _text(data_type).lower()

            notes = ""
            length = _int(char_max_len)
            if length < 0:
                # (max) columns report -1
                notes = f"column {col_name} is {data_type}(max)"
                length = 0
            if not length and data_type in ("decimal", "numeric"):
                length = _int(num_prec)

            columns.append(
                ColumnMeta(
                    index=i,
                    name=col_name,
                    database_type_name=data_type,
                    column_type=data_type,
                    column_length=length,
                    nullable=_text(is_nullable).upper() == "YES",
                    is_primary_key=col_name in primary_keys,
                    is_auto_increment=_int(is_identity) == 1,
                    default_value=_text(col_default),
                    notes=notes,
                )
            )

        return self._assemble(sql_type, sql_database, table_name, columns)
