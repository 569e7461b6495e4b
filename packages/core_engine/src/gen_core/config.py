"""Generator configuration: annotation toggles, name formats and mapping overlay."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from jsonschema import Draft202012Validator

from gen_core.errors import ConfigParseError
from gen_core.mappings import TypeRegistry
from gen_core.naming import NAME_FORMATS

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "sql_type": {"type": "string"},
        "sql_database": {"type": "string"},
        "model_package_name": {"type": "string", "minLength": 1},
        "add_json_annotation": {"type": "boolean"},
        "add_gorm_annotation": {"type": "boolean"},
        "add_protobuf_annotation": {"type": "boolean"},
        "add_db_annotation": {"type": "boolean"},
        "use_guregu_types": {"type": "boolean"},
        "json_name_format": {"enum": list(NAME_FORMATS)},
        "protobuf_name_format": {"enum": list(NAME_FORMATS)},
        "mapping_file": {"type": ["string", "null"]},
        "verbose": {"type": "boolean"},
    },
}


@dataclass
class GeneratorConfig:
    """Configuration for building field and model descriptors."""

    sql_type: str = "mysql"
    sql_database: str = ""
    model_package_name: str = "model"
    add_json_annotation: bool = True
    add_gorm_annotation: bool = False
    add_protobuf_annotation: bool = False
    add_db_annotation: bool = False
    use_guregu_types: bool = False
    json_name_format: str = "snake"
    protobuf_name_format: str = "snake"
    mapping_file: Optional[str] = None
    verbose: bool = False

    def __post_init__(self) -> None:
        self.json_name_format = self.json_name_format.lower()
        self.protobuf_name_format = self.protobuf_name_format.lower()

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_config(path: str) -> GeneratorConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ConfigParseError(f"Invalid config YAML in {path}: {exc}") from exc

    if data is None:
        return GeneratorConfig()

    if not isinstance(data, dict):
        raise ConfigParseError("Config YAML must parse to an object/map at root.")

    validator = Draft202012Validator(CONFIG_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    if errors:
        first = errors[0]
        location = "/" + "/".join(str(part) for part in first.absolute_path)
        raise ConfigParseError(f"Invalid config at {location}: {first.message}")

    mapping_file = data.get("mapping_file")
    if mapping_file and not Path(mapping_file).is_absolute():
        data["mapping_file"] = str(config_path.parent / mapping_file)

    return GeneratorConfig(**data)


def build_registry(config: GeneratorConfig) -> TypeRegistry:
    """Packaged default mappings overlaid with ``config.mapping_file``, if set."""
    registry = TypeRegistry.with_defaults()
    if config.mapping_file:
        registry.load_file(config.mapping_file)
    return registry
