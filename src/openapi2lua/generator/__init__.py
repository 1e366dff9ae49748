"""Lua client generator -- path tree construction and Lua source emission.

This sub-package is the core of openapi2lua.  It performs no I/O: it takes the
flat ``path -> method -> operation`` map produced by the parser and returns
Lua source text.

Typical usage::

    from openapi2lua.generator import build_tree, emit_client
    from openapi2lua.models import EmitOptions

    tree = build_tree(paths)
    source = emit_client(tree, EmitOptions(client_name="PetStore"))

Sub-modules:

* :mod:`~openapi2lua.generator.tree` -- Group routes into a tree keyed by
  static path segments, collecting path parameters per route.
* :mod:`~openapi2lua.generator.identifiers` -- Turn arbitrary names into
  valid Lua identifiers and choose dot or bracket member access.
* :mod:`~openapi2lua.generator.emitter` -- Walk the tree and render the
  Lua module, including the shared request dispatcher.
"""

from openapi2lua.generator.emitter import emit_client
from openapi2lua.generator.tree import build_tree

__all__ = ["build_tree", "emit_client"]
