"""Group flat OpenAPI routes into a tree keyed by static path segments.

``/users/{id}/flags`` and ``/users/{id}`` both live under the ``users`` node;
the former additionally creates a ``flags`` child.  Path parameters never
become tree keys -- they are collected, in order, on the :class:`Route`
attached to the node where the path ends, and later become positional
arguments of the generated Lua function.

Only whole-segment placeholders count as parameters.  A segment such as
``file.{ext}`` is a literal key, kept verbatim.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from openapi2lua.models import PathTreeNode, Route

# Narrower than a greedy `^{(.+)}$`: `{a}.{b}` and `{{id}}` stay literal keys,
# which keeps every parameter a whole, substitutable URL segment.
_PARAM_SEGMENT_RE = re.compile(r"\{([^{}]+)\}")


def build_tree(routes: Mapping[str, Mapping[str, Any]]) -> PathTreeNode:
    """Build a :class:`~openapi2lua.models.PathTreeNode` from a route map.

    Args:
        routes: Mapping of path template to a mapping of method token to
            operation payload, e.g.
            ``{"/users/{id}": {"get": {...}, "delete": {...}}}``.  Path and
            method order is preserved in the resulting tree.

    Returns:
        The root node.  Paths that share a static prefix share the same
        node objects for that prefix.

    Example::

        tree = build_tree({"/a/{id}/b": {"get": None}})
        route = tree.children["a"].children["b"].methods["get"]
        # route.full_path == "/a/{id}/b", route.path_params == ["id"]
    """
    root = PathTreeNode()
    for full_path, methods in routes.items():
        _insert_path(root, full_path, methods)
    return root


def split_segments(full_path: str) -> list[str]:
    """Split a path template into its non-empty segments.

    A single leading ``/`` is removed and empty segments are dropped, so
    ``"//a///b/"`` -> ``["a", "b"]`` and ``"/"`` -> ``[]``.
    """
    path = full_path[1:] if full_path.startswith("/") else full_path
    return [segment for segment in path.split("/") if segment]


def param_name(segment: str) -> str | None:
    """Return the parameter name if *segment* is exactly ``{name}``, else ``None``."""
    match = _PARAM_SEGMENT_RE.fullmatch(segment)
    return match.group(1) if match else None


def _insert_path(
    root: PathTreeNode,
    full_path: str,
    methods: Mapping[str, Any],
) -> None:
    """Walk *full_path* from *root*, creating nodes, and attach its routes."""
    current = root
    path_params: list[str] = []

    for segment in split_segments(full_path):
        name = param_name(segment)
        if name is not None:
            path_params.append(name)
            continue

        child = current.children.get(segment)
        if child is None:
            child = PathTreeNode()
            current.children[segment] = child
        current = child

    for method, operation in methods.items():
        current.methods[method] = Route(
            full_path=full_path,
            path_params=path_params,
            operation=operation,
        )
