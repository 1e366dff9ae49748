"""Emit a Lua client module from a path tree.

This is the second half of the generator.  It takes the
:class:`~openapi2lua.models.PathTreeNode` produced by
:func:`~openapi2lua.generator.tree.build_tree` and produces one Lua chunk.

**Output layout**

1. The client class table and its ``__index``.
2. Query-string helpers (``encodeComponent``, ``encodeQuery``) when query
   support is on.
3. ``Client:new(config)`` -- creates the instance and, inside it, one nested
   table per static path segment plus one function per operation.
4. Base-header mutators when header support is on.
5. ``Client:_request(options)`` -- the single dispatch routine every
   generated function calls: merges headers, encodes the query, assembles
   the URL, and hands the request description to ``config.request``.

Items 1, 2, 4 and 5 are fixed text rendered from the Jinja2 template
``templates/client.lua.j2``; item 3 is produced here by a depth-first walk
of the tree.

Each generated function accepts its path parameters positionally followed
by an options table (``body``, ``headers``, ``query``, ``binary``,
``redirect``, ``timeout``).  With ``receiver_call`` enabled it also accepts
the namespace table as a leading argument, so ``client.users.get("1")`` and
``client.users:get("1")`` send the same request.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from openapi2lua.generator.identifiers import (
    child_accessor,
    lua_string_literal,
    to_identifier,
    to_unique_identifiers,
)
from openapi2lua.generator.tree import param_name
from openapi2lua.models import EmitOptions, PathTreeNode, Route

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``generator/templates/``)."""

INSTANCE_REF = "instance"
"""Lua local holding the client instance inside ``Client:new``."""

INDENT = "  "

PASSTHROUGH_FIELDS = ("body", "headers", "query", "binary", "redirect", "timeout")
"""Options forwarded from a generated function to ``_request`` (in order)."""

# Locals used by the generated function bodies.  Parameter locals are kept
# clear of these so a path parameter named e.g. ``instance`` cannot shadow
# the client instance.
_ARGS_LOCAL = "__args"
_OFFSET_LOCAL = "__offset"
_OPTIONS_LOCAL = "__options"
RESERVED_LOCALS = frozenset({INSTANCE_REF, _ARGS_LOCAL, _OFFSET_LOCAL, _OPTIONS_LOCAL})

# Chunk-level names the runtime skeleton refers to.  The client table is a
# chunk-level local, so it must not shadow any of them.
RESERVED_CLIENT_NAMES = frozenset({
    "encodeComponent",
    "encodeQuery",
    "ipairs",
    "next",
    "pairs",
    "setmetatable",
    "string",
    "table",
    "tostring",
    "type",
})


def emit_client(tree: PathTreeNode, options: Optional[EmitOptions] = None) -> str:
    """Render the complete Lua client module for *tree*.

    Args:
        tree: Root of the path tree from
            :func:`~openapi2lua.generator.tree.build_tree`.
        options: Emission options.  ``None`` means all defaults (client
            named ``Client``, header and query support, receiver calls).

    Returns:
        The Lua source text.  The chunk ends with ``return <Client>``.

    Example::

        tree = build_tree({"/users/{id}": {"get": {}}})
        source = emit_client(tree, EmitOptions(client_name="Users"))
    """
    options = options or EmitOptions()
    client_name = client_identifier(options.client_name)

    lines: list[str] = []
    emit_node(lines, INSTANCE_REF, tree, options)

    env = _create_jinja_env()
    template = env.get_template("client.lua.j2")
    return template.render(
        client_name=client_name,
        header_support=options.header_support,
        query_support=options.query_support,
        namespaces="\n".join(lines).strip("\n"),
    )


def client_identifier(raw: Optional[str]) -> str:
    """Return the Lua local name used for the client table.

    Names that would shadow a helper or library global used by the runtime
    skeleton get a trailing ``_``, e.g. ``encodeQuery`` -> ``encodeQuery_``.
    """
    name = to_identifier(raw or "Client")
    if name in RESERVED_CLIENT_NAMES:
        name = f"{name}_"
    return name


def _create_jinja_env() -> Environment:
    """Create the Jinja2 environment for the Lua templates.

    Autoescaping is off for ``.lua.j2`` templates; block trimming keeps the
    ``{% if %}`` feature switches from leaving blank lines behind.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(disabled_extensions=("lua.j2",)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


# ---------------------------------------------------------------------------
# Tree walk
# ---------------------------------------------------------------------------


def emit_node(
    lines: list[str],
    parent_ref: str,
    node: PathTreeNode,
    options: EmitOptions,
) -> None:
    """Append the Lua statements for *node* (and its subtree) to *lines*.

    Children come first, each as an empty table followed by its own
    subtree; the functions for the node's own methods come last.
    """
    for key, child in node.children.items():
        child_ref = child_accessor(parent_ref, key)
        lines.append(f"{INDENT}{child_ref} = {{}}")
        emit_node(lines, child_ref, child, options)

    for method, route in node.methods.items():
        emit_method(lines, parent_ref, method, route, options)


def emit_method(
    lines: list[str],
    table_ref: str,
    method: str,
    route: Route,
    options: EmitOptions,
) -> None:
    """Append the function implementing *method* on *table_ref* to *lines*."""
    params = to_unique_identifiers(route.path_params, reserved=RESERVED_LOCALS).ordered
    field = method.replace("@", "")
    fn_ref = child_accessor(table_ref, field)
    body = INDENT * 2

    lines.append("")
    lines.append(f"{INDENT}{fn_ref} = function(...)")
    lines.append(f"{body}local {_ARGS_LOCAL} = {{ ... }}")
    if options.receiver_call:
        lines.append(f"{body}local {_OFFSET_LOCAL} = 0")
        lines.append(f"{body}if {_ARGS_LOCAL}[1] == {table_ref} then")
        lines.append(f"{body}{INDENT}{_OFFSET_LOCAL} = 1")
        lines.append(f"{body}end")
    for position, local in enumerate(params, start=1):
        lines.append(f"{body}local {local} = {_arg_ref(position, options)}")
    options_ref = _arg_ref(len(params) + 1, options)
    lines.append(f"{body}local {_OPTIONS_LOCAL} = {options_ref} or {{}}")

    fields = [
        f"url = {build_url_expression(route.full_path, params)}",
        f"method = {lua_string_literal(field.upper())}",
    ]
    for name in PASSTHROUGH_FIELDS:
        if name == "query" and not options.query_support:
            continue
        fields.append(f"{name} = {_OPTIONS_LOCAL}.{name}")

    lines.append(f"{body}return {INSTANCE_REF}:_request {{")
    lines.append(",\n".join(f"{body}{INDENT}{field_line}" for field_line in fields))
    lines.append(f"{body}}}")
    lines.append(f"{INDENT}end")


def _arg_ref(position: int, options: EmitOptions) -> str:
    """Lua expression for the *position*-th (1-based) logical argument."""
    if options.receiver_call:
        return f"{_ARGS_LOCAL}[{_OFFSET_LOCAL} + {position}]"
    return f"{_ARGS_LOCAL}[{position}]"


def build_url_expression(full_path: str, param_locals: list[str]) -> str:
    """Build the Lua expression producing the relative URL of a route.

    Every whole-segment ``{name}`` in *full_path* is replaced, left to right,
    by the next entry of *param_locals*; the placeholder text itself is
    never used for the lookup, so repeated names bind by position.  All other
    text, slashes included, is kept verbatim as escaped string literals.

    Example::

        >>> build_url_expression("/users/{id}/flags", ["id"])
        '"/users/" .. id .. "/flags"'
        >>> build_url_expression("/a/{id}/b/{id}", ["id", "id_2"])
        '"/a/" .. id .. "/b/" .. id_2'
    """
    parts: list[str] = []
    literal = ""
    remaining = iter(param_locals)

    for index, segment in enumerate(full_path.split("/")):
        if index:
            literal += "/"
        if param_name(segment) is None:
            literal += segment
            continue
        if literal:
            parts.append(lua_string_literal(literal))
            literal = ""
        parts.append(next(remaining))

    if literal or not parts:
        parts.append(lua_string_literal(literal))
    return " .. ".join(parts)
