"""
TypeScript definitions for a Parse schema.

Renders one ``<Class>.ts`` module per class plus an ``index.ts`` that
re-exports them, either for the Parse JS SDK (``Parse.Object`` based) or as
plain REST payload shapes.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from ..config import TypeScriptOptions
from ..exceptions import UnsupportedFieldTypeError
from ..schema.models import DEFAULT_FIELDS, ClassSchema, FieldSchema


logger = logging.getLogger(__name__)

DEFAULT_TYPESCRIPT_PATH = Path("schema") / "typescript"

SCALAR_TYPES = {
    "String": "string",
    "Number": "number",
    "Boolean": "boolean",
    "Object": "any",
    "Array": "any[]",
}

SDK_TYPES = {
    "Date": "Date",
    "GeoPoint": "Parse.GeoPoint",
    "Polygon": "Parse.Polygon",
    "File": "Parse.File",
}

REST_TYPES = {
    "Date": '{ __type: "Date"; iso: string }',
    "GeoPoint": '{ __type: "GeoPoint"; latitude: number; longitude: number }',
    "Polygon": '{ __type: "Polygon"; coordinates: [number, number][] }',
    "File": '{ __type: "File"; name: string; url: string }',
}

SPECIAL_CLASSES = {
    "_User": "Parse.User",
    "_Role": "Parse.Role",
    "_Session": "Parse.Session",
}


def generate_typescript(
    schemas: List[ClassSchema], options: Optional[TypeScriptOptions] = None
) -> Dict[str, str]:
    """
    Render TypeScript modules for *schemas*.

    With a prefix, only classes inside the namespace and system classes
    (``_User``, ``_Role``, ...) are rendered, under their unprefixed names.

    Returns:
        Mapping of file name to file content

    Raises:
        UnsupportedFieldTypeError: If a field type has no TypeScript mapping
    """
    options = options or TypeScriptOptions()
    prefix = options.prefix or ""

    if prefix:
        if any(s.class_name == prefix for s in schemas):
            logger.warning(f"Skip class named exactly the prefix: {prefix}")
        schemas = [
            s for s in schemas
            if s.class_name != prefix
            and (s.class_name.startswith(prefix) or s.class_name.startswith("_"))
        ]

    def strip(name: str) -> str:
        if prefix and name.startswith(prefix):
            return name[len(prefix):]
        return name

    files: Dict[str, str] = {}
    for schema in schemas:
        files[f"{strip(schema.class_name)}.ts"] = _render_class(schema, options, strip)

    names = [strip(schema.class_name) for schema in schemas]
    if options.sdk:
        exports = [f'export {{ {n}, {n}Attributes }} from "./{n}";' for n in names]
    else:
        exports = [f'export {{ {n}Attributes }} from "./{n}";' for n in names]
    files["index.ts"] = "\n".join(exports) + "\n"

    return files


def write_typescript(
    schemas: List[ClassSchema],
    path: Optional[Union[str, Path]] = None,
    options: Optional[TypeScriptOptions] = None,
) -> List[Path]:
    """Render *schemas* and write the modules into the *path* directory."""
    directory = Path(path or DEFAULT_TYPESCRIPT_PATH)
    directory.mkdir(parents=True, exist_ok=True)

    written = []
    for name, content in generate_typescript(schemas, options).items():
        file = directory / name
        file.write_text(content, encoding="utf-8")
        written.append(file)

    logger.info(f"Wrote {len(written)} TypeScript files to {directory}")
    return written


def _render_class(
    schema: ClassSchema, options: TypeScriptOptions, strip: Callable[[str], str]
) -> str:
    name = strip(schema.class_name)
    dependencies: List[str] = []

    if options.sdk:
        attributes = [
            "id: string;",
            "objectId: string;",
            "createdAt: Date;",
            "updatedAt: Date;",
        ]
    else:
        attributes = [
            "objectId: string;",
            "createdAt: string;",
            "updatedAt: string;",
        ]

    for field_name, field in schema.fields.items():
        if field_name in DEFAULT_FIELDS:
            continue
        optional = "" if field.required else "?"
        ts_type = _field_type(schema, field, options, strip, dependencies)
        attributes.append(f"{field_name}{optional}: {ts_type};")

    out = ""

    if options.sdk and not options.global_sdk:
        out += 'import Parse from "parse";\n\n'

    if options.sdk:
        unique = []
        for dependency in dependencies:
            if dependency != name and dependency not in unique:
                unique.append(dependency)
        for dependency in unique:
            out += f'import {{ {dependency} }} from "./{dependency}";\n'
        if unique:
            out += "\n"

    out += f"export interface {name}Attributes {{\n"
    for attribute in attributes:
        out += f"  {attribute}\n"
    out += "}\n"

    if options.sdk:
        out += "\n"
        if schema.class_name in SPECIAL_CLASSES:
            base = SPECIAL_CLASSES[schema.class_name]
            out += f"export type {name} = {base}<{name}Attributes>;\n"
        elif options.subclass:
            out += f"export class {name} extends Parse.Object<{name}Attributes> {{\n"
            out += f"  constructor(data?: Partial<{name}Attributes>) {{\n"
            out += f'    super("{schema.class_name}", data as {name}Attributes);\n'
            out += "  }\n"
            out += "}\n"
            out += "\n"
            out += f'Parse.Object.registerSubclass("{schema.class_name}", {name});\n'
        else:
            out += f"export type {name} = Parse.Object<{name}Attributes>;\n"

    return out


def _field_type(
    schema: ClassSchema,
    field: FieldSchema,
    options: TypeScriptOptions,
    strip: Callable[[str], str],
    dependencies: List[str],
) -> str:
    if field.type in SCALAR_TYPES:
        return SCALAR_TYPES[field.type]

    if field.type in SDK_TYPES:
        return SDK_TYPES[field.type] if options.sdk else REST_TYPES[field.type]

    if field.type == "Pointer":
        target = strip(field.target_class)
        dependencies.append(target)
        if options.sdk:
            return target
        return f'{{ __type: "Pointer"; className: "{target}"; objectId: string }}'

    if field.type == "Relation":
        target = strip(field.target_class)
        dependencies.append(target)
        if options.sdk:
            return f"Parse.Relation<{target}>"
        return f'{{ __type: "Relation"; className: "{target}" }}'

    raise UnsupportedFieldTypeError(field.type, class_name=schema.class_name)
