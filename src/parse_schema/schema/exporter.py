"""
Export of class schemas to local documents.

The output is what ``load_local_schema`` reads back: a combined document
when *path* names a ``.json``/``.yaml``/``.yml`` file, one
``<ClassName>.json`` per class otherwise.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Union

import yaml

from .models import ClassSchema


logger = logging.getLogger(__name__)


def export_schema(schemas: List[ClassSchema], path: Union[str, Path]) -> List[Path]:
    """
    Write *schemas* below *path*.

    Returns:
        The files written
    """
    path = Path(path)

    if path.suffix.lower() in (".json", ".yaml", ".yml"):
        path.parent.mkdir(parents=True, exist_ok=True)
        documents = [schema.to_document() for schema in schemas]
        _write(path, documents)
        logger.info(f"Exported {len(schemas)} classes to {path}")
        return [path]

    path.mkdir(parents=True, exist_ok=True)
    written = []
    for schema in schemas:
        document = schema.to_document()
        document.pop("className")
        document.pop("indexes", None)
        file = path / f"{schema.class_name}.json"
        _write(file, document)
        written.append(file)

    logger.info(f"Exported {len(schemas)} classes to {path}/")
    return written


def _write(file: Path, data: Any) -> None:
    with open(file, "w", encoding="utf-8") as f:
        if file.suffix.lower() == ".json":
            f.write(json.dumps(data, indent=2) + "\n")
        else:
            yaml.safe_dump(data, f, default_flow_style=False, indent=2, sort_keys=False)
