"""Follow ``$ref`` pointers on parameter, request-body and response objects.

Schema references are deliberately *not* inlined: the normalizer keeps them as
bare names so the expansion engine can resolve them lazily and bound its
recursion. Reusable *non-schema* components, however, have to be looked up
before the parsers can read ``name``/``in``/``content`` off them::

    {"$ref": "#/parameters/LimitParam"}              # Swagger 2.0
    {"$ref": "#/components/requestBodies/PetBody"}   # OpenAPI 3.x

Only internal references (starting with ``#/``) are supported. Chains of
references are followed until a concrete object is reached; a chain that
loops back on itself raises :class:`~specreport.exceptions.InvalidSpecError`.
"""

from __future__ import annotations

from typing import Any

from specreport.exceptions import InvalidSpecError


def deref(obj: Any, root: dict[str, Any]) -> Any:
    """Return *obj* with any top-level ``$ref`` chain followed.

    Non-dict values and dicts without ``$ref`` are returned unchanged. Nested
    values are never touched.

    Args:
        obj: A parameter, request body, or response object.
        root: The whole specification document.

    Raises:
        InvalidSpecError: If a reference is external, dangling, or circular.
    """
    seen: set[str] = set()
    while isinstance(obj, dict) and isinstance(obj.get("$ref"), str):
        ref = obj["$ref"]
        if ref in seen:
            raise InvalidSpecError(f"Circular $ref chain at '{ref}'")
        seen.add(ref)
        obj = resolve_pointer(ref, root)
    return obj


def resolve_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Resolve a single internal JSON pointer against the root document.

    Handles RFC 6901 escaping (``~0`` for ``~``, ``~1`` for ``/``).

    Args:
        ref: The ``$ref`` string (e.g., ``"#/components/parameters/Limit"``).
        root: The root document to navigate.

    Returns:
        The value found at the referenced location.

    Raises:
        InvalidSpecError: If the reference is external or any segment is
            missing.
    """
    if not ref.startswith("#/"):
        raise InvalidSpecError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                raise InvalidSpecError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise InvalidSpecError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise InvalidSpecError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current
