"""Convert dialect-specific schema objects into :class:`~specreport.models.NormalizedSchema`.

Swagger 2.0 and OpenAPI 3.x describe payloads with near-identical JSON Schema
subsets that differ in two places that matter here:

* **Reference syntax** -- ``#/definitions/Pet`` versus
  ``#/components/schemas/Pet``. Both are rewritten to the bare name ``Pet``
  by :func:`extract_ref_name`.
* **Composition keywords** -- Swagger 2.0 only knows ``allOf``; OpenAPI 3.x
  adds ``anyOf`` and ``oneOf``.

The public functions are :func:`normalize_swagger_schema` and
:func:`normalize_openapi_schema`, both pure and recursive over ``items``,
``properties`` and the composition keywords of their dialect. A parent's
``required`` name list is pushed down onto each matching property as a
boolean flag.

:func:`select_media_type` implements the representative media type choice
used for OpenAPI 3.x request and response bodies.
"""

from __future__ import annotations

from typing import Any

from specreport.models import NormalizedSchema

_SWAGGER_COMPOSITIONS = ("allOf",)
_OPENAPI_COMPOSITIONS = ("allOf", "anyOf", "oneOf")
_COMPOSITION_FIELDS = {"allOf": "all_of", "anyOf": "any_of", "oneOf": "one_of"}

# Media types tried in order before falling back to the first declared one
_MEDIA_TYPE_PRIORITY = ("application/json", "application/xml", "text/plain")
DEFAULT_MEDIA_TYPE = "application/json"


def normalize_swagger_schema(raw: Any) -> NormalizedSchema:
    """Normalize a Swagger 2.0 *Schema Object*.

    Args:
        raw: The schema dict. Anything other than a dict normalizes to an
            empty schema.

    Returns:
        The normalized schema. ``anyOf``/``oneOf`` are ignored because the
        dialect does not define them.
    """
    return _normalize(raw, _SWAGGER_COMPOSITIONS)


def normalize_openapi_schema(raw: Any) -> NormalizedSchema:
    """Normalize an OpenAPI 3.0/3.1 *Schema Object*.

    Handles OpenAPI 3.1 type arrays (``["string", "null"]``) by keeping the
    first non-null type.

    Args:
        raw: The schema dict. Anything other than a dict (for instance the
            boolean schemas allowed by 3.1) normalizes to an empty schema.

    Returns:
        The normalized schema, including ``anyOf`` and ``oneOf`` members.
    """
    return _normalize(raw, _OPENAPI_COMPOSITIONS)


def _normalize(raw: Any, compositions: tuple[str, ...]) -> NormalizedSchema:
    if not isinstance(raw, dict):
        return NormalizedSchema()

    fields: dict[str, Any] = {
        "type": _extract_type(raw.get("type")),
        "format": raw.get("format"),
        "description": raw.get("description"),
        "minimum": raw.get("minimum"),
        "maximum": raw.get("maximum"),
        "min_length": raw.get("minLength"),
        "max_length": raw.get("maxLength"),
        "enum": raw.get("enum"),
    }

    ref = raw.get("$ref")
    if isinstance(ref, str):
        fields["ref"] = extract_ref_name(ref)

    if "items" in raw:
        fields["items"] = _normalize(raw["items"], compositions)

    properties = raw.get("properties")
    if isinstance(properties, dict):
        required_names = raw.get("required")
        if not isinstance(required_names, list):
            required_names = []
        normalized_props: dict[str, NormalizedSchema] = {}
        for name, prop in properties.items():
            child = _normalize(prop, compositions)
            if name in required_names:
                child = child.model_copy(update={"required": True})
            normalized_props[name] = child
        fields["properties"] = normalized_props

    for keyword in compositions:
        members = raw.get(keyword)
        if isinstance(members, list):
            fields[_COMPOSITION_FIELDS[keyword]] = [
                _normalize(member, compositions) for member in members
            ]

    return NormalizedSchema(**fields)


def _extract_type(type_value: Any) -> str | None:
    """Return the schema type, reducing OpenAPI 3.1 type arrays to their first non-null entry."""
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return str(non_null[0]) if non_null else None
    if type_value is None:
        return None
    return str(type_value)


def extract_ref_name(ref: str) -> str:
    """Reduce a ``$ref`` pointer to the bare definition name.

    Example::

        >>> extract_ref_name("#/definitions/Pet")
        'Pet'
        >>> extract_ref_name("#/components/schemas/Pet")
        'Pet'
        >>> extract_ref_name("common.yaml#/Error")
        'Error'
    """
    if "#/definitions/" in ref:
        return ref.replace("#/definitions/", "")
    if "#/components/schemas/" in ref:
        return ref.replace("#/components/schemas/", "")
    return ref.split("/")[-1] or ref


def select_media_type(content: dict[str, Any] | None) -> str:
    """Pick the representative media type of an OpenAPI 3.x ``content`` map.

    Priority is ``application/json`` > ``application/xml`` > ``text/plain``
    > the first declared media type. Missing or empty content yields
    :data:`DEFAULT_MEDIA_TYPE`.
    """
    if not content:
        return DEFAULT_MEDIA_TYPE

    for media_type in _MEDIA_TYPE_PRIORITY:
        if media_type in content:
            return media_type

    return next(iter(content))
