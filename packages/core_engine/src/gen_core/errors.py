"""Exception types raised by the metadata and type-mapping core."""

from typing import Sequence


class GenCoreError(Exception):
    """Base class for all gen_core errors."""


class ConfigParseError(GenCoreError):
    """A mapping document or generator config could not be parsed."""


class UnknownTypeError(GenCoreError, LookupError):
    """A raw SQL type has no entry in the mapping registry."""

    def __init__(self, sql_type: str) -> None:
        self.sql_type = sql_type
        super().__init__(f"unknown sql type: {sql_type}")


class LoadError(GenCoreError):
    """Catalog introspection failed for one table."""

    def __init__(self, sql_type: str, database: str, table: str, reason: str) -> None:
        self.sql_type = sql_type
        self.database = database
        self.table = table
        self.reason = reason
        super().__init__(
            f"unable to load metadata for {sql_type} table {database}.{table}: {reason}"
        )


class BuildError(GenCoreError):
    """A table's field descriptors could not be built."""


class UnsupportedPrimaryKeyError(BuildError):
    def __init__(
        self,
        table: str,
        column: str,
        index: int,
        database_type: str,
        field_type: str,
    ) -> None:
        self.table = table
        self.column = column
        self.index = index
        self.database_type = database_type
        self.field_type = field_type
        super().__init__(
            f"unable to generate code for table: {table}, primary key column: "
            f"[{index}] {column} has unsupported type: {database_type} / {field_type}"
        )


class CompositePrimaryKeyError(BuildError):
    def __init__(self, table: str, columns: Sequence[str]) -> None:
        self.table = table
        self.columns = list(columns)
        super().__init__(
            f"unable to generate code for table: {table}, composite primary key "
            f"({', '.join(self.columns)}) is not supported"
        )
