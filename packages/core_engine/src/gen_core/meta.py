"""Engine-agnostic table and column metadata.

Every dialect loader produces the same DbTableMeta shape; downstream code
never needs to know which engine a table came from.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class ColumnMeta:
    index: int
    name: str
    database_type_name: str
    column_type: str = ""
    column_length: int = 0
    nullable: bool = True
    is_primary_key: bool = False
    is_auto_increment: bool = False
    is_array: bool = False
    default_value: str = ""
    notes: str = ""
    col_ddl: str = ""

    @property
    def database_type_pretty(self) -> str:
        column_type = self.column_type or self.database_type_name
        if self.column_length > 0:
            return f"{column_type}({self.column_length})"
        return column_type

    def __str__(self) -> str:
        return (
            f"[{self.index:2d}] {self.name:<45}  {self.database_type_pretty:<20} "
            f"null: {str(self.nullable).lower():<6} primary: {str(self.is_primary_key).lower():<6} "
            f"isArray: {str(self.is_array).lower():<6} auto: {str(self.is_auto_increment).lower():<6} "
            f"col: {self.column_type:<15} len: {self.column_length:<7d} default: [{self.default_value}]"
        )


@dataclass(frozen=True)
class DbTableMeta:
    sql_type: str
    sql_database: str
    table_name: str
    columns: Tuple[ColumnMeta, ...] = field(default_factory=tuple)
    ddl: str = ""
    primary_key_pos: int = -1

    def __post_init__(self) -> None:
        # Accept any iterable but always store an immutable tuple.
        object.__setattr__(self, "columns", tuple(self.columns))
        for position, column in enumerate(self.columns):
            if column.index != position:
                raise ValueError(
                    f"table {self.table_name}: column {column.name} has index "
                    f"{column.index}, expected {position}"
                )

    def primary_key_columns(self) -> List[ColumnMeta]:
        return [column for column in self.columns if column.is_primary_key]

    def column(self, name: str) -> Optional[ColumnMeta]:
        for column in self.columns:
            if column.name == name:
                return column
        return None


def primary_key_position(columns: Iterable[ColumnMeta]) -> int:
    """Ordinal of the single primary key column, -1 for none or composite keys."""
    keys = [column.index for column in columns if column.is_primary_key]
    if len(keys) == 1:
        return keys[0]
    return -1


def build_default_table_ddl(table_name: str, columns: Iterable[ColumnMeta]) -> str:
    lines = [f"Table: {table_name}"]
    for column in columns:
        lines.append(str(column))
    return "\n".join(lines) + "\n"
