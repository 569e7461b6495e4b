from gen_core.builder import (
    FieldInfo,
    ModelInfo,
    build_fields,
    build_model_info,
    load_table_infos,
)
from gen_core.config import GeneratorConfig, build_registry, load_config
from gen_core.connections import ConnectionConfig, check_driver, open_connection
from gen_core.errors import (
    BuildError,
    CompositePrimaryKeyError,
    ConfigParseError,
    GenCoreError,
    LoadError,
    UnknownTypeError,
    UnsupportedPrimaryKeyError,
)
from gen_core.issues import Issue
from gen_core.loaders import get_loader, list_loaders, load_meta
from gen_core.mappings import SQLMapping, TypeRegistry, cleanup_sql_type
from gen_core.meta import ColumnMeta, DbTableMeta

__all__ = [
    "build_fields",
    "build_model_info",
    "build_registry",
    "BuildError",
    "check_driver",
    "cleanup_sql_type",
    "ColumnMeta",
    "CompositePrimaryKeyError",
    "ConfigParseError",
    "ConnectionConfig",
    "DbTableMeta",
    "FieldInfo",
    "GenCoreError",
    "GeneratorConfig",
    "get_loader",
    "Issue",
    "list_loaders",
    "load_config",
    "load_meta",
    "load_table_infos",
    "LoadError",
    "ModelInfo",
    "open_connection",
    "SQLMapping",
    "TypeRegistry",
    "UnknownTypeError",
    "UnsupportedPrimaryKeyError",
]
