"""Canonical Pydantic models shared across all openapi2lua modules.

This is the single source of truth for data shapes in the project. The models
fall into two groups:

**Configuration models** -- resolved from CLI flags, environment variables, and
the project file:
    :class:`EmitOptions` and :class:`GeneratorConfig`.

**Generator models** -- produced by the tree builder and consumed by the Lua
emitter:
    :class:`Route`, :class:`PathTreeNode`, and :class:`UniqueIdentifiers`.

The generator models are frozen: once :func:`~openapi2lua.generator.tree.build_tree`
returns, the tree is only ever read.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class EmitOptions(BaseModel):
    """Options controlling what the Lua emitter produces.

    ``header_support`` and ``query_support`` are independent: either runtime
    feature can be switched off without affecting the other.

    Example::

        EmitOptions(client_name="PetStore", query_support=False)
    """

    client_name: str = Field(
        default="Client", description="Name of the generated Lua client table"
    )
    header_support: bool = Field(
        default=True,
        description="Emit base headers, header mutators, and header merging",
    )
    query_support: bool = Field(
        default=True, description="Emit query-string encoding in the dispatcher"
    )
    receiver_call: bool = Field(
        default=True,
        description="Let generated callables accept the namespace table as a "
        "leading argument so both f(...) and ns:f(...) work",
    )


class GeneratorConfig(BaseModel):
    """Effective configuration for one generation run.

    Built by :func:`~openapi2lua.config.resolve_config` from defaults, the
    project file (``./openapi2lua.json``), environment variables, and CLI
    flags, in increasing order of precedence.
    """

    model_config = ConfigDict(extra="forbid")

    spec: str = Field(
        default="openapi.json", description="Spec source: file path, URL, or '-'"
    )
    out: str = Field(
        default="client.lua", description="Output Lua file, or '-' for stdout"
    )
    name: str = Field(default="Client", description="Lua client table name")
    header_support: bool = True
    query_support: bool = True
    receiver_call: bool = True

    def emit_options(self) -> EmitOptions:
        """Return the :class:`EmitOptions` subset of this configuration."""
        return EmitOptions(
            client_name=self.name,
            header_support=self.header_support,
            query_support=self.query_support,
            receiver_call=self.receiver_call,
        )


# --- Generator ---


class Route(BaseModel):
    """One (path, method) pair terminating at a :class:`PathTreeNode`.

    ``path_params`` holds one entry per ``{name}`` occurrence in
    ``full_path``, left to right, duplicates included.  ``operation`` is the
    payload from the spec, carried through unexamined.
    """

    model_config = ConfigDict(frozen=True)

    full_path: str
    path_params: list[str] = Field(default_factory=list)
    operation: Any = None


class PathTreeNode(BaseModel):
    """A node of the path tree.

    ``children`` maps static path segments to child nodes and ``methods``
    maps method tokens to the routes ending here.  Both preserve insertion
    order, which is also the emission order.
    """

    model_config = ConfigDict(frozen=True)

    children: dict[str, PathTreeNode] = Field(default_factory=dict)
    methods: dict[str, Route] = Field(default_factory=dict)


PathTreeNode.model_rebuild()


class UniqueIdentifiers(BaseModel):
    """Result of :func:`~openapi2lua.generator.identifiers.to_unique_identifiers`.

    ``ordered`` is positional and always has one distinct identifier per
    input name.  ``mapping`` keeps only the last identifier written for a
    repeated raw name, so positional bindings must use ``ordered``.
    """

    mapping: dict[str, str] = Field(default_factory=dict)
    ordered: list[str] = Field(default_factory=list)
