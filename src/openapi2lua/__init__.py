"""openapi2lua -- Generate Lua API clients from OpenAPI 2.0/3.x specs.

This package converts an OpenAPI description into a single Lua module whose
nested tables mirror the API's path hierarchy. Every operation becomes a
callable that builds the request URL from its path parameters and hands a
request description to a transport function supplied by the caller at
runtime.

Typical workflow::

    openapi2lua --spec openapi.json --out client.lua --name Client

The generated module is used from Lua like::

    local Client = require("client")
    local client = Client:new({ baseUrl = "https://api.example.com", request = http_request })
    client.users.flags.get("123", { headers = { ["X-Trace"] = "1" } })

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: Generator configuration resolution and atomic file writes.
    pipeline: Load -> dereference -> tree -> Lua source orchestration.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
