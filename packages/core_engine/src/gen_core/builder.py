"""Field and model descriptor builder.

Consumes normalized table metadata plus a TypeRegistry and produces the
FieldInfo/ModelInfo structures handed to the rendering templates. Column
level problems (unmapped types, name collisions) are recovered locally and
reported as Issues; an unusable primary key fails the whole table.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from gen_core.config import GeneratorConfig
from gen_core.errors import (
    BuildError,
    CompositePrimaryKeyError,
    LoadError,
    UnknownTypeError,
    UnsupportedPrimaryKeyError,
)
from gen_core.issues import Issue, issue_path
from gen_core.loaders import get_loader
from gen_core.mappings import SQLMapping, TypeRegistry
from gen_core.meta import ColumnMeta, DbTableMeta
from gen_core.naming import fmt_field_name, format_field_name, singular, to_camel
from gen_core.samples import TypeCategory, categorize, fake_value, make_faker, sample_value

logger = logging.getLogger(__name__)

UNSUPPORTED_PARSER = "unsupported"

# Parsing strategy for primary key arguments, keyed by non-null native type.
PRIMARY_KEY_PARSERS = {
    "int": "parseInt",
    "int8": "parseInt8",
    "int16": "parseInt16",
    "int32": "parseInt32",
    "int64": "parseInt64",
    "uint": "parseUint",
    "uint8": "parseUint8",
    "uint16": "parseUint16",
    "uint32": "parseUint32",
    "uint64": "parseUint64",
    "string": "parseString",
    "uuid.UUID": "parseUUID",
}


@dataclass
class FieldInfo:
    """Codegen info for one retained column."""

    index: int
    field_name: str
    field_type: str
    json_field_name: str
    protobuf_field_name: str
    protobuf_type: str
    comment: str
    sample_value: Any
    category: TypeCategory
    column_meta: ColumnMeta
    sql_mapping: SQLMapping
    annotations: List[str] = field(default_factory=list)
    protobuf_pos: int = 0
    notes: str = ""
    primary_key_field_parser: str = ""
    primary_key_arg_name: str = ""

    @property
    def is_primary_key(self) -> bool:
        return self.column_meta.is_primary_key


@dataclass
class ModelInfo:
    """Codegen info for one table."""

    package_name: str
    struct_name: str
    short_struct_name: str
    table_name: str
    fields: List[FieldInfo]
    db_meta: DbTableMeta
    instance: Dict[str, Any]
    index: int = 0
    index_plus1: int = 1

    def primary_key_fields(self) -> List[FieldInfo]:
        return [f for f in self.fields if f.is_primary_key]

    def notes(self) -> str:
        lines = []
        for i, column in enumerate(self.db_meta.columns):
            if column.notes:
                lines.append(f"[{i:2d}] {column.notes}")
        for i, f in enumerate(self.fields):
            if f.notes:
                lines.append(f"[{i:2d}] {f.notes}")
        return "".join(f"{line}\n" for line in lines)

    def fake_instance(self, seed: Optional[int] = None) -> Dict[str, Any]:
        """Randomized record with one value per field, for fixture data."""
        faker = make_faker(seed)
        return {f.field_name: fake_value(f.category, faker) for f in self.fields}


def _record(issues: Optional[List[Issue]], severity: str, code: str, message: str, path: str) -> None:
    if severity == "error":
        logger.error("%s: %s", path, message)
    else:
        logger.warning("%s: %s", path, message)
    if issues is not None:
        issues.append(Issue(severity=severity, code=code, message=message, path=path))


# ---------------------------------------------------------------------------
# Annotations
# ---------------------------------------------------------------------------

def create_json_annotation(name_format: str, column: ColumnMeta) -> str:
    return f'json:"{format_field_name(name_format, column.name)}"'


def create_db_annotation(column: ColumnMeta) -> str:
    return f'db:"{column.name}"'


def create_protobuf_annotation(name_format: str, column: ColumnMeta, protobuf_type: str, pos: int) -> Optional[str]:
    if not protobuf_type:
        return None
    name = format_field_name(name_format, column.name)
    return f'protobuf:"{protobuf_type},{pos},opt,name={name}"'


def create_gorm_annotation(column: ColumnMeta) -> str:
    parts = []
    if column.is_primary_key:
        parts.append("primary_key;")
    if column.is_auto_increment:
        parts.append("AUTO_INCREMENT;")
    parts.append(f"column:{column.name};")

    if column.database_type_name:
        parts.append(f"type:{column.database_type_name.upper()};")
        if column.column_length > 0:
            parts.append(f"size:{column.column_length};")

        value = column.default_value.replace('"', "'")
        if value in ("NULL", "null"):
            value = ""
        # Function call defaults such as now() are left to the database.
        if value and "()" not in value:
            parts.append(f"default:{value};")

    return 'gorm:"' + "".join(parts) + '"'


def _annotations(config: GeneratorConfig, f: FieldInfo) -> List[str]:
    annotations = []
    if config.add_gorm_annotation:
        annotations.append(create_gorm_annotation(f.column_meta))
    if config.add_json_annotation:
        annotations.append(create_json_annotation(config.json_name_format, f.column_meta))
    if config.add_db_annotation:
        annotations.append(create_db_annotation(f.column_meta))
    if config.add_protobuf_annotation:
        annotation = create_protobuf_annotation(
            config.protobuf_name_format, f.column_meta, f.protobuf_type, f.protobuf_pos
        )
        if annotation:
            annotations.append(annotation)
    return annotations


def _assign_protobuf_positions(fields: List[FieldInfo]) -> None:
    ordered = [f for f in fields if f.is_primary_key] + [f for f in fields if not f.is_primary_key]
    for pos, f in enumerate(ordered, start=1):
        f.protobuf_pos = pos


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def build_fields(
    db_meta: DbTableMeta,
    config: GeneratorConfig,
    registry: TypeRegistry,
    issues: Optional[List[Issue]] = None,
) -> List[FieldInfo]:
    """Build FieldInfo for every mappable column of a table, in column order.

    Raises UnsupportedPrimaryKeyError or CompositePrimaryKeyError when the
    table's primary key cannot be used by generated lookups.
    """
    fields: List[FieldInfo] = []
    taken = set()

    for column in db_meta.columns:
        path = issue_path(db_meta.table_name, column.name)
        try:
            mapping = registry.resolve(column.database_type_name)
        except UnknownTypeError as exc:
            _record(
                issues,
                "warning",
                "UNKNOWN_TYPE",
                f"{db_meta.sql_type} table: {db_meta.table_name} unable to generate struct field: "
                f"{column.name} type: {column.database_type_name} error: {exc}",
                path,
            )
            continue

        field_type = mapping.native_type(column.nullable, config.use_guregu_types)
        native_type = mapping.go_type
        category = categorize(native_type)

        notes = ""
        field_name = fmt_field_name(column.name)
        if field_name in taken:
            renamed = f"{field_name}_"
            while renamed in taken:
                renamed = f"{renamed}_"
            notes = f"field name {field_name} already used, renamed to {renamed}"
            _record(issues, "warning", "NAME_COLLISION", f"column {column.name}: {notes}", path)
            field_name = renamed
        taken.add(field_name)

        f = FieldInfo(
            index=len(fields),
            field_name=field_name,
            field_type=field_type,
            json_field_name=format_field_name(config.json_name_format, column.name),
            protobuf_field_name=format_field_name(config.protobuf_name_format, column.name),
            protobuf_type=mapping.protobuf_type,
            comment=str(column),
            sample_value=sample_value(category),
            category=category,
            column_meta=column,
            sql_mapping=mapping,
            notes=notes,
        )

        if column.is_primary_key:
            f.primary_key_field_parser = PRIMARY_KEY_PARSERS.get(native_type, UNSUPPORTED_PARSER)
            f.primary_key_arg_name = f"arg{to_camel(field_name)}"

        logger.debug(
            "table: %-10s type: %-10s fieldname: %-20s val: %r",
            db_meta.table_name, native_type, field_name, f.sample_value,
        )
        fields.append(f)

    _assign_protobuf_positions(fields)
    for f in fields:
        f.annotations = _annotations(config, f)

    for f in fields:
        if f.primary_key_field_parser == UNSUPPORTED_PARSER:
            raise UnsupportedPrimaryKeyError(
                table=db_meta.table_name,
                column=f.column_meta.name,
                index=f.column_meta.index,
                database_type=f.column_meta.database_type_name,
                field_type=f.field_type,
            )

    # All key columns, including any skipped above.
    keys = [column.name for column in db_meta.primary_key_columns()]
    if len(keys) > 1:
        raise CompositePrimaryKeyError(db_meta.table_name, keys)

    return fields


def build_model_info(
    db_meta: DbTableMeta,
    table_name: str,
    config: GeneratorConfig,
    registry: TypeRegistry,
    issues: Optional[List[Issue]] = None,
) -> ModelInfo:
    struct_name = singular(fmt_field_name(table_name))
    fields = build_fields(db_meta, config, registry, issues)

    if config.verbose:
        logger.info("tableName: %s", table_name)
        for column in db_meta.columns:
            logger.info("    %s", column)

    return ModelInfo(
        package_name=config.model_package_name,
        struct_name=struct_name,
        short_struct_name=struct_name[:1].lower(),
        table_name=table_name,
        fields=fields,
        db_meta=db_meta,
        instance={f.field_name: f.sample_value for f in fields},
    )


def load_table_infos(
    conn: Any,
    config: GeneratorConfig,
    registry: TypeRegistry,
    table_names: Optional[Iterable[str]] = None,
    issues: Optional[List[Issue]] = None,
) -> Dict[str, ModelInfo]:
    """Load and build a ModelInfo for each table.

    A table whose metadata cannot be loaded or whose model cannot be built is
    reported and skipped; the remaining tables are still processed. When
    ``table_names`` is omitted every table in ``config.sql_database`` is used.
    """
    loader = get_loader(config.sql_type)
    if table_names is None:
        table_names = loader.table_names(conn, config.sql_database)

    table_infos: Dict[str, ModelInfo] = {}
    table_idx = 0
    for i, table_name in enumerate(table_names):
        if table_name.startswith("[") and table_name.endswith("]"):
            table_name = table_name[1:-1]
        path = issue_path(table_name)

        try:
            db_meta = loader.load(conn, config.sql_type, config.sql_database, table_name)
        except LoadError as exc:
            _record(issues, "error", "LOAD_FAILED", f"Error getting table info for {table_name} error: {exc}", path)
            continue

        try:
            model_info = build_model_info(db_meta, table_name, config, registry, issues)
        except BuildError as exc:
            _record(issues, "error", "BUILD_FAILED", f"Error building model for {table_name} error: {exc}", path)
            continue

        if not model_info.fields:
            _record(issues, "warning", "NO_FIELDS", f"[{i}] Table: {table_name} - No Fields Available", path)
            continue

        model_info.index = table_idx
        model_info.index_plus1 = table_idx + 1
        table_idx += 1
        table_infos[table_name] = model_info

    return table_infos
