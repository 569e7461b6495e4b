"""SQL type mapping registry.

Raw SQL type names reported by a database are mapped to their target
representations (native, nullable, null-safe wrapper, JSON, protobuf and
swagger types) through a table loaded from a mapping document::

    {"mappings": [{"sql_type": "varchar", "go_type": "string", ...}]}

The table is data, not code: a deployment can overlay a handful of records
on top of the packaged defaults without touching the mapping logic.
"""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Union

import yaml
from jsonschema import Draft202012Validator

from gen_core.errors import ConfigParseError, UnknownTypeError

logger = logging.getLogger(__name__)

DEFAULT_MAPPINGS_PATH = Path(__file__).with_name("default_mappings.json")

MAPPING_FIELDS = (
    "sql_type",
    "go_type",
    "json_type",
    "protobuf_type",
    "guregu_type",
    "go_nullable_type",
    "swagger_type",
)

MAPPING_DOCUMENT_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["mappings"],
    "properties": {
        "mappings": {
            "type": "array",
            "items": {
                "type": "object",
                "required": list(MAPPING_FIELDS),
                "properties": {
                    **{name: {"type": "string"} for name in MAPPING_FIELDS},
                    "sql_type": {"type": "string", "minLength": 1},
                },
            },
        }
    },
}


def cleanup_sql_type(sql_type: str) -> str:
    """Normalize a raw type name: ``" VARCHAR(255) "`` -> ``"varchar"``."""
    value = sql_type.strip().lower()
    idx = value.find("(")
    if idx > -1:
        value = value[:idx]
    return value.strip()


@dataclass(frozen=True)
class SQLMapping:
    """Target representations for one canonical SQL type."""

    sql_type: str
    go_type: str
    json_type: str
    protobuf_type: str
    guregu_type: str
    go_nullable_type: str
    swagger_type: str

    def native_type(self, nullable: bool = False, null_safe: bool = False) -> str:
        if nullable and null_safe:
            return self.guregu_type
        if nullable:
            return self.go_nullable_type
        return self.go_type

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    def __str__(self) -> str:
        return (
            f"SQLType: {self.sql_type:<15}  GoType: {self.go_type:<15} "
            f"GureguType: {self.guregu_type:<15} GoNullableType: {self.go_nullable_type:<15} "
            f"JSONType: {self.json_type:<15} ProtobufType: {self.protobuf_type:<15}"
        )


class TypeRegistry:
    """Mutable table of SQLMapping records keyed by normalized SQL type.

    All ``load`` calls are expected to finish before ``resolve`` calls begin;
    the registry does no locking of its own.
    """

    def __init__(self) -> None:
        self._mappings: Dict[str, SQLMapping] = {}
        self._validator = Draft202012Validator(MAPPING_DOCUMENT_SCHEMA)

    @classmethod
    def with_defaults(cls) -> "TypeRegistry":
        registry = cls()
        registry.load_file(DEFAULT_MAPPINGS_PATH)
        return registry

    def load(self, document: Union[str, bytes, Mapping[str, Any]]) -> int:
        """Merge a mapping document into the registry.

        Records overwrite existing entries with the same normalized
        ``sql_type``; within one document the last record wins. Returns the
        number of records merged.
        """
        if isinstance(document, (str, bytes, bytearray)):
            try:
                document = json.loads(document)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise ConfigParseError(f"Invalid mapping JSON: {exc}") from exc

        errors = sorted(self._validator.iter_errors(document), key=lambda e: list(e.absolute_path))
        if errors:
            first = errors[0]
            location = "/" + "/".join(str(part) for part in first.absolute_path)
            raise ConfigParseError(f"Invalid mapping document at {location}: {first.message}")

        records = document["mappings"]
        merged: Dict[str, SQLMapping] = {}
        for i, record in enumerate(records):
            key = cleanup_sql_type(record["sql_type"])
            if not key:
                raise ConfigParseError(
                    f"Invalid mapping document at /mappings/{i}/sql_type: "
                    f"{record['sql_type']!r} is empty after normalization"
                )
            values = {name: record[name] for name in MAPPING_FIELDS}
            values["sql_type"] = key
            merged[key] = SQLMapping(**values)
            logger.debug("    Mapping:[%2d] -> %s", i, key)

        self._mappings.update(merged)
        logger.debug("Loaded %d mappings", len(records))
        return len(records)

    def load_file(self, path: Union[str, Path]) -> int:
        mapping_path = Path(path)
        if not mapping_path.exists():
            raise FileNotFoundError(f"Mapping file not found: {path}")

        try:
            text = mapping_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ConfigParseError(f"Mapping file {path} is not valid UTF-8: {exc}") from exc

        if mapping_path.suffix.lower() in (".yaml", ".yml"):
            try:
                data = yaml.safe_load(text)
            except yaml.YAMLError as exc:
                raise ConfigParseError(f"Invalid mapping YAML in {path}: {exc}") from exc
            return self.load(data if data is not None else {})
        return self.load(text)

    def resolve(self, raw_type: str) -> SQLMapping:
        key = cleanup_sql_type(raw_type)
        mapping = self._mappings.get(key)
        if mapping is None:
            raise UnknownTypeError(key)
        return mapping

    def resolve_type(self, raw_type: str, nullable: bool = False, null_safe: bool = False) -> str:
        return self.resolve(raw_type).native_type(nullable, null_safe)

    def protobuf_type(self, raw_type: str) -> str:
        return self.resolve(raw_type).protobuf_type

    def list(self) -> Mapping[str, SQLMapping]:
        return MappingProxyType(dict(self._mappings))

    def format_mappings(self) -> str:
        return "\n".join(str(self._mappings[key]) for key in sorted(self._mappings))

    def __contains__(self, raw_type: object) -> bool:
        return isinstance(raw_type, str) and cleanup_sql_type(raw_type) in self._mappings

    def __len__(self) -> int:
        return len(self._mappings)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._mappings))
