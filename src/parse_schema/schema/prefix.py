"""
Class name namespacing.

A prefix lets several logical schema sets share one Parse Server. Local
schema documents reference classes of their own set through the
``{{PREFIX}}`` placeholder, e.g. ``"targetClass": "{{PREFIX}}Author"``.

All functions return new ``ClassSchema`` values; inputs are left untouched.
Prefix checks are literal string prefix matches.
"""

import logging
from typing import Dict, List, Optional

from .models import ClassSchema, FieldSchema


logger = logging.getLogger(__name__)

PREFIX_PLACEHOLDER = "{{PREFIX}}"


def add_prefix(schemas: List[ClassSchema], prefix: Optional[str]) -> List[ClassSchema]:
    """
    Move local schemas into the *prefix* namespace.

    Class names become ``prefix + name`` and a leading placeholder in a
    Pointer/Relation ``targetClass`` is replaced with *prefix*.

    Examples:
        >>> [post] = add_prefix([ClassSchema(className="Post")], "blog_")
        >>> post.class_name
        'blog_Post'
    """
    if not prefix:
        return list(schemas)

    return [
        schema.model_copy(
            update={
                "class_name": prefix + schema.class_name,
                "fields": _retarget(
                    schema.fields,
                    lambda target: target.startswith(PREFIX_PLACEHOLDER),
                    lambda target: prefix + target[len(PREFIX_PLACEHOLDER):],
                ),
            }
        )
        for schema in schemas
    ]


def add_prefix_to_names(schemas: List[ClassSchema], prefix: Optional[str]) -> List[ClassSchema]:
    """Prefix class names only; field targets are left as they are."""
    if not prefix:
        return list(schemas)

    return [
        schema.model_copy(update={"class_name": prefix + schema.class_name})
        for schema in schemas
    ]


def filter_prefixed(schemas: List[ClassSchema], prefix: Optional[str]) -> List[ClassSchema]:
    """Keep only the classes inside the *prefix* namespace."""
    if not prefix:
        return list(schemas)

    return [schema for schema in schemas if schema.class_name.startswith(prefix)]


def remove_prefix(schemas: List[ClassSchema], prefix: Optional[str]) -> List[ClassSchema]:
    """
    Take remote schemas out of the *prefix* namespace.

    Classes outside the namespace are dropped, the prefix is stripped from
    class names and Pointer/Relation targets inside the namespace are
    rewritten to the placeholder so the result can be re-imported under
    any prefix.

    A class named exactly *prefix* has no name inside the namespace and is
    left out with a warning.
    """
    if not prefix:
        return list(schemas)

    inside = []
    for schema in filter_prefixed(schemas, prefix):
        if schema.class_name == prefix:
            logger.warning(f"Skip class named exactly the prefix: {schema.class_name}")
            continue
        inside.append(schema)

    return [
        schema.model_copy(
            update={
                "class_name": schema.class_name[len(prefix):],
                "fields": _retarget(
                    schema.fields,
                    lambda target: target.startswith(prefix),
                    lambda target: PREFIX_PLACEHOLDER + target[len(prefix):],
                ),
            }
        )
        for schema in inside
    ]


def _retarget(fields: Dict[str, FieldSchema], matches, rewrite) -> Dict[str, FieldSchema]:
    result = {}
    for name, field in fields.items():
        target = field.target_class
        if field.is_relational and target is not None and matches(target):
            field = field.model_copy(update={"target_class": rewrite(target)})
        result[name] = field
    return result
