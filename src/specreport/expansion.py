"""Flatten nested schemas into ordered field rows.

:func:`expand_schema` walks a :class:`~specreport.models.NormalizedSchema`
depth-first and produces one :class:`~specreport.models.ExpandedField` per
property, in declaration order. The row order is the row order of the
rendered table.

Recursion across properties is bounded, not cycle-checked. Resolving a ``ref``
does not cost a level, so a self-referential definition such as::

    {"Node": {"properties": {"child": {"ref": "Node"}}}}

emits ``child`` rows with growing indentation until ``level`` exceeds
``max_level`` and then stops. Deep (not just self-referencing) schemas are
truncated at the same bound. Cycles that never pass through a property
(``A -> B -> A`` aliases, ``allOf`` members referring back to their owner)
stop at the first repeated name with a ``Circular reference`` row.

Rows are indented by two spaces per level, and a required property carries a
trailing ``*``::

    id*            integer (int64)
    tags           array of Tag
      name         string
"""

from __future__ import annotations

from typing import Optional

from specreport.models import ExpandedField, NormalizedSchema, TypeInfo

MAX_EXPAND_LEVEL = 10

#: Formats shown in place of the base type (``date-time`` rather than
#: ``string (date-time)``).
MEANINGFUL_FORMATS = frozenset(
    {
        "date-time",
        "date",
        "time",
        "email",
        "uri",
        "uuid",
        "password",
        "binary",
        "byte",
        "int32",
        "int64",
        "float",
        "double",
    }
)

_INDENT = "  "


def expand_schema(
    schema: Optional[NormalizedSchema],
    definitions: dict[str, NormalizedSchema],
    level: int = 0,
    max_level: int = MAX_EXPAND_LEVEL,
) -> list[ExpandedField]:
    """Expand *schema* into a flat list of field rows.

    Args:
        schema: The schema to expand. ``None`` yields no rows.
        definitions: Named schemas that ``ref`` values resolve against.
        level: Current nesting level; controls indentation.
        max_level: Deepest level still expanded.

    Returns:
        The rows in depth-first, declaration order. Empty once ``level``
        exceeds ``max_level``.
    """
    return _expand(schema, definitions, level, max_level, frozenset())


def _expand(
    schema: Optional[NormalizedSchema],
    definitions: dict[str, NormalizedSchema],
    level: int,
    max_level: int,
    seen: frozenset[str],
) -> list[ExpandedField]:
    """Expand one schema at *level*.

    *seen* holds the reference names already resolved at this level. Refs,
    ``allOf`` members and top-level array items stay on the same level, so
    a name showing up twice here is a cycle that would never reach
    ``max_level``; it becomes a placeholder row instead. Each branch gets
    its own copy, and nested properties start over with an empty set.
    """
    if schema is None or level > max_level:
        return []

    indent = _INDENT * level

    if schema.ref:
        if schema.ref in seen:
            return [
                ExpandedField(
                    field=f"{indent}{{{schema.ref}}}",
                    type="object",
                    description=f"Circular reference {schema.ref}",
                )
            ]
        definition = definitions.get(schema.ref)
        if definition is not None:
            return _expand(definition, definitions, level, max_level, seen | {schema.ref})
        return [
            ExpandedField(
                field=f"{indent}{{{schema.ref}}}",
                type="object",
                description=f"Reference {schema.ref}",
            )
        ]

    if schema.all_of:
        rows: list[ExpandedField] = []
        for member in schema.all_of:
            rows.extend(_expand(member, definitions, level, max_level, seen))
        return rows

    if schema.type == "object" or schema.properties:
        return _expand_properties(schema, definitions, level, max_level)

    if schema.type == "array" and schema.items is not None:
        return _expand(schema.items, definitions, level, max_level, seen)

    return []


def _expand_properties(
    schema: NormalizedSchema,
    definitions: dict[str, NormalizedSchema],
    level: int,
    max_level: int,
) -> list[ExpandedField]:
    indent = _INDENT * level
    rows: list[ExpandedField] = []

    for name, prop in (schema.properties or {}).items():
        display_name = f"{name}*" if prop.required else name
        type_info = get_type_info(prop)
        rows.append(
            ExpandedField(
                field=f"{indent}{display_name}",
                type=type_info.type,
                description=type_info.description or prop.description or "",
            )
        )

        if _is_complex(prop):
            rows.extend(expand_schema(prop, definitions, level + 1, max_level))
        elif prop.type == "array" and prop.items is not None:
            rows.extend(expand_schema(prop.items, definitions, level + 1, max_level))

    return rows


def _is_complex(prop: NormalizedSchema) -> bool:
    """Whether a property gets its own nested rows."""
    if prop.type == "object" or prop.properties or prop.ref or prop.all_of:
        return True
    # Untyped but structurally non-trivial, e.g. a bare {"description", "enum"} pair
    if prop.type is None and prop.format is None:
        return len(prop.model_dump(exclude_none=True, exclude={"required"})) > 1
    return False


def get_type_info(schema: Optional[NormalizedSchema]) -> TypeInfo:
    """Derive the display label and description of *schema*.

    Example::

        >>> get_type_info(NormalizedSchema(type="string", format="uuid")).type
        'uuid'
        >>> get_type_info(NormalizedSchema(type="string", format="hostname")).type
        'string (hostname)'
        >>> get_type_info(NormalizedSchema(enum=["a", "b"])).description
        'Allowed values: a, b'
    """
    if schema is None:
        return TypeInfo(type="", description="")

    if schema.ref:
        return TypeInfo(type=schema.ref, description=schema.description or "")

    if schema.enum:
        values = ", ".join(_enum_literal(value) for value in schema.enum)
        return TypeInfo(type="enum", description=f"Allowed values: {values}")

    if schema.type == "array":
        item = get_type_info(schema.items)
        return TypeInfo(type=f"array of {item.type}", description=schema.description or "")

    return TypeInfo(type=_scalar_label(schema), description=schema.description or "")


def format_schema(schema: Optional[NormalizedSchema]) -> str:
    """Return the type label alone, as used in simple parameter rows.

    Unlike :func:`get_type_info`, enums keep their declared type.
    """
    if schema is None:
        return ""
    if schema.ref:
        return schema.ref
    if schema.type == "array":
        return f"array of {format_schema(schema.items)}"
    if schema.type:
        return _scalar_label(schema)
    return "object"


def _scalar_label(schema: NormalizedSchema) -> str:
    base = schema.type or "object"
    if schema.format:
        if schema.format in MEANINGFUL_FORMATS:
            return schema.format
        return f"{base} ({schema.format})"
    return base


def _enum_literal(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)
