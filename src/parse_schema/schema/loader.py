"""
Local schema loading.

A local schema is either a directory holding one document per class
(``Post.json``, ``Comment.yaml``, ...) or a single document holding a list
of classes, as written by the export.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import LocalSchemaNotFoundError, LocalSchemaParseError
from .models import ClassSchema


logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path("schema") / "classes"

SCHEMA_SUFFIXES = (".json", ".yaml", ".yml")


def load_local_schema(path: Optional[Union[str, Path]] = None) -> List[ClassSchema]:
    """
    Load the local schema set.

    Args:
        path: Schema directory or combined document (default: schema/classes)

    Returns:
        Class schemas in file order

    Raises:
        LocalSchemaNotFoundError: If *path* does not exist
        LocalSchemaParseError: If a document is malformed or a class name repeats
    """
    path = Path(path or DEFAULT_SCHEMA_PATH).resolve()

    if not path.exists():
        raise LocalSchemaNotFoundError(
            f"Local schema not found: {path}", path=str(path)
        )

    if path.is_dir():
        schemas = [_load_class_file(file) for file in _schema_files(path)]
    else:
        schemas = _load_combined_file(path)

    seen = set()
    for schema in schemas:
        if schema.class_name in seen:
            raise LocalSchemaParseError(
                f"Duplicate class '{schema.class_name}' in local schema", path=str(path)
            )
        seen.add(schema.class_name)

    logger.debug(f"Loaded {len(schemas)} local class schemas from {path}")
    return schemas


def _schema_files(directory: Path) -> List[Path]:
    return sorted(
        file
        for file in directory.iterdir()
        if file.is_file() and file.suffix.lower() in SCHEMA_SUFFIXES
    )


def _load_class_file(file: Path) -> ClassSchema:
    document = _read_document(file)

    if not isinstance(document, dict):
        raise LocalSchemaParseError(
            "Class document must be a mapping", path=str(file)
        )

    document = {"className": file.stem, **document}
    return _validate(document, file)


def _load_combined_file(file: Path) -> List[ClassSchema]:
    if file.suffix.lower() not in SCHEMA_SUFFIXES:
        raise LocalSchemaParseError(
            f"Unsupported schema file type: '{file.suffix}'", path=str(file)
        )

    document = _read_document(file)

    if not isinstance(document, list):
        raise LocalSchemaParseError(
            "Combined schema document must be a list of classes", path=str(file)
        )

    schemas = []
    for item in document:
        if not isinstance(item, dict) or "className" not in item:
            raise LocalSchemaParseError(
                "Every class in a combined schema needs a className", path=str(file)
            )
        schemas.append(_validate(item, file))
    return schemas


def _read_document(file: Path) -> Any:
    try:
        with open(file, "r", encoding="utf-8") as f:
            if file.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except json.JSONDecodeError as e:
        raise LocalSchemaParseError(f"Invalid JSON: {e}", path=str(file), cause=e) from e
    except yaml.YAMLError as e:
        raise LocalSchemaParseError(f"Invalid YAML: {e}", path=str(file), cause=e) from e


def _validate(document: Dict[str, Any], file: Path) -> ClassSchema:
    try:
        return ClassSchema.model_validate(document)
    except ValidationError as e:
        raise LocalSchemaParseError(
            f"Invalid class schema '{document.get('className')}': {e}",
            path=str(file),
        ) from e
