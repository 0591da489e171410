"""Canonical Pydantic models shared across all specreport modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into four groups:

**Normalized spec models** -- the dialect-neutral representation produced by
the parsers, built once per input document and never mutated afterwards:
    :class:`SpecVersion`, :class:`ParameterLocation`,
    :class:`NormalizedSchema`, :class:`NormalizedParameter`,
    :class:`NormalizedRequestBody`, :class:`NormalizedResponse`,
    :class:`NormalizedOperation`, :class:`APIInfo`, :class:`ServerInfo`,
    :class:`TagInfo`, and :class:`NormalizedApiSpec`.

**Legacy shape models** -- the grouped, sorted contract handed to renderers:
    :class:`LegacyParameter`, :class:`LegacyResponse`, :class:`ApiEndpoint`,
    :class:`ApiGroup`, and :class:`LegacySpec`.

**Filter models** -- user-declared selection rules and their outcome:
    :class:`ApiSelector`, :class:`FilterRules`, :class:`FilterOptions`,
    :class:`ApiFilterConfig`, :class:`SkippedApi`, and :class:`FilterResult`.

**Report models** -- expanded field rows and render-ready tables:
    :class:`ExpandedField`, :class:`TypeInfo`, :class:`ParameterRow`,
    :class:`FieldTable`, :class:`ResponseSection`, :class:`EndpointReport`,
    :class:`GroupReport`, :class:`ReportDocument`, and :class:`SpecSummary`.

Models that mirror JSON documents declare camelCase aliases (``allOf``,
``pathPatterns``, ``onNoMatch``) and accept both spellings on input via
``populate_by_name``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Normalized Spec Models ---


class SpecVersion(str, Enum):
    """Specification dialects recognised by the version detector."""

    SWAGGER_2_0 = "swagger-2.0"
    OPENAPI_3_0 = "openapi-3.0"
    OPENAPI_3_1 = "openapi-3.1"


class ParameterLocation(str, Enum):
    """Locations a parameter can be declared in, across both dialects.

    ``BODY`` and ``FORM_DATA`` only occur in Swagger 2.0 documents; ``COOKIE``
    only in OpenAPI 3.x documents.
    """

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    BODY = "body"
    FORM_DATA = "formData"
    COOKIE = "cookie"


class NormalizedSchema(BaseModel):
    """Dialect-neutral type descriptor.

    ``ref`` holds a bare definition name (``"Pet"``), never a JSON pointer.
    ``required`` is not self-declared: the normalizer pushes the parent
    object's ``required`` name list down onto each matching property so the
    expansion engine can mark required rows without re-reading the parent.

    Several drivers (``ref``, ``properties``, ``items``, compositions) may be
    set at once, e.g. a reference with a sibling ``description``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Optional[str] = None
    format: Optional[str] = None
    description: Optional[str] = None
    required: Optional[bool] = None
    items: Optional[NormalizedSchema] = None
    properties: Optional[dict[str, NormalizedSchema]] = None
    all_of: Optional[list[NormalizedSchema]] = Field(default=None, alias="allOf")
    any_of: Optional[list[NormalizedSchema]] = Field(default=None, alias="anyOf")
    one_of: Optional[list[NormalizedSchema]] = Field(default=None, alias="oneOf")
    enum: Optional[list[Any]] = None
    minimum: Optional[int | float] = None
    maximum: Optional[int | float] = None
    min_length: Optional[int] = Field(default=None, alias="minLength")
    max_length: Optional[int] = Field(default=None, alias="maxLength")
    ref: Optional[str] = None


class NormalizedParameter(BaseModel):
    """A single non-body parameter of an operation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: ParameterLocation
    description: Optional[str] = None
    required: Optional[bool] = None
    schema_: Optional[NormalizedSchema] = Field(default=None, alias="schema")


class NormalizedRequestBody(BaseModel):
    """Request payload of an operation, reduced to its primary media type.

    Swagger 2.0 ``in: body`` parameters are promoted to this model; OpenAPI
    3.x bodies keep only the schema of the media type chosen by
    :func:`~specreport.parser.normalizer.select_media_type`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    description: Optional[str] = None
    required: Optional[bool] = None
    schema_: Optional[NormalizedSchema] = Field(default=None, alias="schema")
    media_type: str = Field(default="application/json", alias="mediaType")


class NormalizedResponse(BaseModel):
    """A response keyed by its status code string (``"200"``, ``"default"``)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status_code: str = Field(alias="statusCode")
    description: str = ""
    schema_: Optional[NormalizedSchema] = Field(default=None, alias="schema")
    media_type: Optional[str] = Field(default=None, alias="mediaType")


class NormalizedOperation(BaseModel):
    """One HTTP operation (path + method pair) in dialect-neutral form."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    method: str
    path: str
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    parameters: list[NormalizedParameter] = Field(default_factory=list)
    request_body: Optional[NormalizedRequestBody] = Field(
        default=None, alias="requestBody"
    )
    responses: list[NormalizedResponse] = Field(default_factory=list)
    deprecated: bool = False


class APIInfo(BaseModel):
    """API metadata taken from the document's *Info Object*."""

    model_config = ConfigDict(frozen=True)

    title: str
    version: str
    description: Optional[str] = None


class ServerInfo(BaseModel):
    """A server entry, either declared (OpenAPI 3.x) or synthesized from ``host`` (Swagger 2.0)."""

    model_config = ConfigDict(frozen=True)

    url: str
    description: Optional[str] = None


class TagInfo(BaseModel):
    """An entry of the document's top-level ``tags`` catalog."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None


class NormalizedApiSpec(BaseModel):
    """Complete dialect-neutral representation of one specification document.

    Produced by a :class:`~specreport.parser.base.SpecParser` and consumed once
    by :func:`~specreport.adapter.to_legacy_shape`. ``schemas`` is the
    definitions dictionary that ``ref`` names resolve against.
    """

    model_config = ConfigDict(frozen=True)

    version: SpecVersion
    info: APIInfo
    servers: Optional[list[ServerInfo]] = None
    operations: list[NormalizedOperation] = Field(default_factory=list)
    schemas: dict[str, NormalizedSchema] = Field(default_factory=dict)
    tags: Optional[list[TagInfo]] = None


# --- Legacy Shape Models ---


class LegacyParameter(BaseModel):
    """A parameter as renderers see it.

    ``location`` is serialised as ``in``. Cookie parameters arrive here as
    ``header``; the request body arrives as a synthetic parameter named
    ``body`` located in ``body``.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: str = Field(alias="in")
    required: Optional[bool] = None
    type: Optional[str] = None
    schema_: Optional[NormalizedSchema] = Field(default=None, alias="schema")
    description: Optional[str] = None


class LegacyResponse(BaseModel):
    """A response entry of :attr:`ApiEndpoint.responses`."""

    model_config = ConfigDict(populate_by_name=True)

    description: str = ""
    schema_: Optional[NormalizedSchema] = Field(default=None, alias="schema")


class ApiEndpoint(BaseModel):
    """A flattened operation with defaulted summary and description."""

    model_config = ConfigDict(populate_by_name=True)

    method: str
    path: str
    tag: str
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    summary: str
    description: str
    parameters: list[LegacyParameter] = Field(default_factory=list)
    responses: dict[str, LegacyResponse] = Field(default_factory=dict)
    deprecated: bool = False


class ApiGroup(BaseModel):
    """Endpoints sharing a primary tag, sorted by path."""

    name: str
    endpoints: list[ApiEndpoint] = Field(default_factory=list)


class LegacySpec(BaseModel):
    """The output contract between the core pipeline and a renderer.

    ``definitions`` is the dictionary renderers pass to
    :func:`~specreport.expansion.expand_schema` alongside each parameter or
    response schema; expansion is never pre-computed here.
    """

    title: str
    version: str
    groups: list[ApiGroup] = Field(default_factory=list)
    definitions: dict[str, NormalizedSchema] = Field(default_factory=dict)


# --- Filter Models ---


class NoMatchPolicy(str, Enum):
    """What :class:`~specreport.filters.engine.ApiFilter` does when nothing survives."""

    ERROR = "error"
    WARN = "warn"
    EMPTY = "empty"


class ApiSelector(BaseModel):
    """An exact ``(method, path)`` rule. ``path`` may contain wildcards unless ``strictMatch``."""

    method: str
    path: str


class FilterRules(BaseModel):
    """One side (``include`` or ``exclude``) of a filter configuration.

    A field left as ``None`` is absent; an empty list is present but matches
    nothing.
    """

    model_config = ConfigDict(populate_by_name=True)

    apis: Optional[list[ApiSelector]] = None
    tags: Optional[list[str]] = None
    path_patterns: Optional[list[str]] = Field(default=None, alias="pathPatterns")


class FilterOptions(BaseModel):
    """Matching options shared by every rule of a configuration."""

    model_config = ConfigDict(populate_by_name=True)

    strict_match: bool = Field(
        default=False,
        alias="strictMatch",
        description="Compare selector paths exactly instead of as wildcard patterns",
    )
    case_sensitive: bool = Field(default=False, alias="caseSensitive")
    on_no_match: NoMatchPolicy = Field(default=NoMatchPolicy.WARN, alias="onNoMatch")


class ApiFilterConfig(BaseModel):
    """User-declared rule set selecting a subset of operations.

    Loaded from a JSON document (``--from-json``) or synthesized from a
    comma-separated path list (``--from-literal``). See
    :meth:`~specreport.filters.engine.ApiFilter.validate_config` for the
    minimum content a configuration must carry.

    Example::

        ApiFilterConfig.model_validate({
            "include": {"tags": ["Pets"], "pathPatterns": ["/store/*"]},
            "exclude": {"apis": [{"method": "DELETE", "path": "/pets/*"}]},
            "options": {"onNoMatch": "error"},
        })
    """

    model_config = ConfigDict(populate_by_name=True)

    include: Optional[FilterRules] = None
    exclude: Optional[FilterRules] = None
    operation_ids: Optional[list[str]] = Field(default=None, alias="operationIds")
    options: FilterOptions = Field(default_factory=FilterOptions)

    @classmethod
    def from_literal(cls, paths: list[str]) -> ApiFilterConfig:
        """Build the configuration used by ``--from-literal``.

        Every path becomes an include pattern, matched with wildcards,
        case-insensitively, warning when nothing matches.
        """
        return cls(
            include=FilterRules(path_patterns=paths),
            options=FilterOptions(
                strict_match=False,
                case_sensitive=False,
                on_no_match=NoMatchPolicy.WARN,
            ),
        )


class SkippedApi(BaseModel):
    """Audit entry for an endpoint removed by the filter."""

    method: str
    path: str
    reason: str


class FilterResult(BaseModel):
    """Outcome of one filter invocation."""

    matched: int
    total: int
    filtered_groups: list[ApiGroup] = Field(default_factory=list)
    skipped_apis: list[SkippedApi] = Field(default_factory=list)


# --- Report Models ---


class ExpandedField(BaseModel):
    """One row of a flattened schema table.

    ``field`` carries two spaces of indentation per nesting level and a
    trailing ``*`` when the property is required.
    """

    field: str
    type: str
    description: str = ""


class TypeInfo(BaseModel):
    """Display label and description derived from a schema."""

    type: str
    description: str = ""


class ParameterRow(BaseModel):
    """A simple (non-expanded) parameter row."""

    name: str
    location: str
    type: str
    required: bool = False
    description: str = ""


class FieldTable(BaseModel):
    """An expanded schema table with its heading and caption."""

    heading: str
    caption: str
    rows: list[ExpandedField] = Field(default_factory=list)


class ResponseSection(BaseModel):
    """Everything rendered for one status code.

    Exactly one of ``table`` (schema expanded to at least one row) or
    ``row_type`` (simple status row) is populated.
    """

    status_code: str
    description: str = ""
    table: Optional[FieldTable] = None
    row_type: Optional[str] = None


class EndpointReport(BaseModel):
    """Render-ready data for one endpoint."""

    method: str
    path: str
    caption: str
    summary: str
    description: str
    deprecated: bool = False
    request_tables: list[FieldTable] = Field(default_factory=list)
    parameter_rows: list[ParameterRow] = Field(default_factory=list)
    responses: list[ResponseSection] = Field(default_factory=list)


class GroupReport(BaseModel):
    """Render-ready data for one tag group."""

    name: str
    endpoints: list[EndpointReport] = Field(default_factory=list)


class ReportDocument(BaseModel):
    """The complete serialisable report handed to a renderer."""

    title: str
    version: str
    groups: list[GroupReport] = Field(default_factory=list)


class SpecSummary(BaseModel):
    """Quick look at a raw document without parsing it."""

    version: Optional[SpecVersion] = None
    title: Optional[str] = None
    spec_version: Optional[str] = None
    supported: bool = False


NormalizedSchema.model_rebuild()
