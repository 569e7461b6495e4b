"""PostgreSQL loader: reads information_schema columns and constraints."""

from __future__ import annotations

from typing import Any, List

from gen_core.loaders.base import MetadataLoader, _int, _text, split_schema
from gen_core.meta import ColumnMeta, DbTableMeta


class PostgresLoader(MetadataLoader):
    sql_types = ("postgres", "postgresql")
    display_name = "PostgreSQL"
    default_schema = "public"

    def _table_names(self, conn: Any, sql_database: str) -> List[str]:
        rows = self._query(
            conn,
            """
            SELECT table_schema, table_name
            FROM information_schema.tables
            WHERE table_catalog = %s
              AND table_type = 'BASE TABLE'
              AND table_schema NOT IN ('pg_catalog', 'information_schema')
            ORDER BY table_schema, table_name
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

        # --- Columns ---
        rows = self._query(
            conn,
            """
            SELECT column_name, data_type, udt_name, is_nullable,
                   column_default, character_maximum_length,
                   numeric_precision, is_identity
            FROM information_schema.columns
            WHERE table_schema = %s
              AND table_name = %s
            ORDER BY ordinal_position
            """,
            (schema, table),
        )
        self._require_columns(rows, sql_type, sql_database, table_name)

        # --- Primary keys ---
        key_rows = self._query(
            conn,
            """
            SELECT kcu.column_name
            FROM information_schema.table_constraints tc
            JOIN information_schema.key_column_usage kcu
              ON tc.constraint_name = kcu.constraint_name
              AND tc.table_schema = kcu.table_schema
              AND tc.table_name = kcu.table_name
            WHERE tc.constraint_type = 'PRIMARY KEY'
              AND tc.table_schema = %s
              AND tc.table_name = %s
            ORDER BY kcu.ordinal_position
            """,
            (schema, table),
        )
        primary_keys = [_text(row[0]) for row in key_rows]
        self._check_primary_keys(
            primary_keys, [_text(row[0]) for row in rows], sql_type, sql_database, table_name
        )

        columns: List[ColumnMeta] = []
        for i, row in enumerate(rows):
            col_name, data_type, udt_name, is_nullable, col_default, char_max_len, num_prec, is_identity = row
            col_name = _text(col_name)
            data_type = _text(data_type).lower()
            udt_name = _text(udt_name).lower()
            default_value = _text(col_default)

            is_array = data_type == "array"
            notes = ""
            type_name = data_type
            if is_array:
                # udt_name for arrays is the element type prefixed with "_".
                type_name = udt_name.lstrip("_")
                notes = f"array column {col_name} mapped with element type {type_name}"
            elif data_type == "user-defined":
                type_name = udt_name
                notes = f"user-defined type {udt_name} on column {col_name}"

            length = _int(char_max_len)
            if not length and type_name == "numeric":
                length = _int(num_prec)

            columns.append(
                ColumnMeta(
                    index=i,
                    name=col_name,
                    database_type_name=type_name,
                    column_type=type_name,
                    column_length=length,
                    nullable=_text(is_nullable).upper() == "YES",
                    is_primary_key=col_name in primary_keys,
                    is_auto_increment=(
                        _text(is_identity).upper() == "YES" or default_value.startswith("nextval(")
                    ),
                    is_array=is_array,
                    default_value=default_value,
                    notes=notes,
                )
            )

        return self._assemble(sql_type, sql_database, table_name, columns)
