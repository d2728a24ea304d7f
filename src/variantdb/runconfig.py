"""JSON run configuration for the import runner."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jsonschema import FormatChecker
from jsonschema import exceptions as jsex
from jsonschema.validators import validator_for

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parents[2] / "schemas" / "import_config.schema.json"


class ImportConfigError(ValueError):
    """Run configuration does not match the import config schema."""

    def __init__(self, path: Path, errors: list[jsex.ValidationError]) -> None:
        details = "; ".join(
            f"{error.message} (path=/{'/'.join(str(item) for item in error.path)})" for error in errors
        )
        super().__init__(f"Invalid import config {path}: {details}")
        self.path = path
        self.errors = errors


def compile_validator(schema_path: Path = DEFAULT_SCHEMA_PATH):
    schema = json.loads(schema_path.read_text())
    validator_cls = validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema, format_checker=FormatChecker())


def load_import_config(path: str | Path, schema_path: Path = DEFAULT_SCHEMA_PATH) -> dict[str, Any]:
    """Read and validate a run configuration, raising on the first invalid file."""

    config_path = Path(path)
    payload = json.loads(config_path.read_text())
    errors = sorted(compile_validator(schema_path).iter_errors(payload), key=lambda error: list(error.path))
    if errors:
        raise ImportConfigError(config_path, errors)
    return payload
