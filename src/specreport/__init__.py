"""specreport -- Turn Swagger 2.0 / OpenAPI 3.x documents into report-ready data.

This package normalizes an API specification of either dialect into one
intermediate representation, regroups its operations by tag, optionally
filters them with declarative include/exclude rules, and flattens request and
response schemas into ordered field tables that a renderer (PDF, HTML,
terminal) can lay out without knowing anything about the source dialect.

Typical workflow::

    specreport generate swagger.json --output petstore.json
    specreport generate openapi.yaml --from-literal "/pets/*,/users/?"

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    pipeline: Detection -> parse -> adapt -> filter orchestration.
    adapter: Grouped, sorted "legacy" shape consumed by renderers.
    expansion: Recursive schema flattening into field rows.
    tables: Render-ready request/response tables per endpoint.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
