"""Extract the flat route map the tree builder consumes.

The tree builder wants ``{path: {method: operation}}``.  An OpenAPI *Path
Item Object* mixes operations with shared fields (``parameters``,
``summary``, ``servers``, ...) and ``x-`` extensions; those are dropped here
so they do not turn into generated functions.  Every other key is treated as
a method token and passed through as written, including tokens carrying an
``@`` marker.
"""

from __future__ import annotations

from typing import Any

from openapi2lua.exceptions import SpecParseError

PATH_ITEM_FIELDS = frozenset({"parameters", "summary", "description", "servers", "$ref"})
"""Path Item Object fields that are not operations."""


def extract_paths(spec: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Return the ``path -> method -> operation`` map of a resolved spec.

    Args:
        spec: A spec dictionary, normally already passed through
            :func:`~openapi2lua.parser.resolver.resolve_refs`.

    Returns:
        A new dict preserving the document's path and method order.  A spec
        without ``paths`` yields ``{}``.

    Raises:
        SpecParseError: If ``paths`` or one of its path items is not an
            object.

    Example::

        extract_paths({"paths": {"/pets": {"parameters": [], "get": {}}}})
        # {"/pets": {"get": {}}}
    """
    paths = spec.get("paths")
    if paths is None:
        return {}
    if not isinstance(paths, dict):
        raise SpecParseError(
            f"'paths' must be an object (got {type(paths).__name__})"
        )

    routes: dict[str, dict[str, Any]] = {}
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            raise SpecParseError(
                f"Path item for '{path}' must be an object "
                f"(got {type(path_item).__name__})"
            )
        routes[str(path)] = {
            str(method): operation
            for method, operation in path_item.items()
            if _is_operation_key(str(method))
        }
    return routes


def _is_operation_key(key: str) -> bool:
    """Return ``False`` for shared path-item fields and ``x-`` extensions."""
    return key not in PATH_ITEM_FIELDS and not key.startswith("x-")
