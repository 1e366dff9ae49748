"""Dereference ``$ref`` pointers so every operation payload is self-contained.

The generator treats operation objects as opaque payloads, but it promises
them fully dereferenced: a path item written as
``{"$ref": "#/components/pathItems/Users"}`` must expand to its methods
before the tree builder sees it.

Three kinds of reference are followed:

* ``#/...`` -- a location inside the document the reference appears in.
* ``other.yaml#/...`` or ``../shared/common.json`` -- another file, resolved
  relative to the referring document's location.
* ``https://...`` -- a remote document, or a relative reference inside one.

External documents are loaded with :func:`~openapi2lua.parser.loader.load_spec`
and each one is read at most once per :func:`resolve_refs` call.  A reference
that is already being expanded further up the same branch is a cycle and is
left in place as its ``{"$ref": ...}`` dict.
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urljoin

from openapi2lua.exceptions import SpecParseError
from openapi2lua.output import debug
from openapi2lua.parser.loader import load_spec

_URL_PREFIXES = ("http://", "https://")


def resolve_refs(spec: dict[str, Any], base: Optional[str] = None) -> dict[str, Any]:
    """Return a deep copy of *spec* with every ``$ref`` expanded.

    Args:
        spec: The raw spec dictionary from
            :func:`~openapi2lua.parser.loader.load_spec`.  It is not
            modified.
        base: Where *spec* was loaded from (file path or URL).  Relative
            file references are resolved against it; ``None`` (e.g. a spec
            read from stdin) resolves them against the working directory.

    Returns:
        A new dictionary in which resolvable ``$ref`` dicts are replaced by
        (recursively resolved) copies of their targets.

    Raises:
        SpecParseError: For pointers to missing locations or referenced
            documents that cannot be loaded.

    Example::

        resolved = resolve_refs(load_spec("api/openapi.yaml"), base="api/openapi.yaml")
    """
    root = copy.deepcopy(spec)
    location = _normalize_location(base) if base else ""
    resolver = _RefResolver({location: root})
    return resolver.expand(root, location, frozenset())


def resolve_pointer(ref: str, root: Any) -> Any:
    """Follow the JSON Pointer fragment *ref* (e.g. ``#/components/schemas/Pet``).

    ``#`` (or an empty string) is the whole document.  Segments are
    unescaped per RFC 6901 (``~1`` -> ``/``, ``~0`` -> ``~``) and may index
    into lists.

    Raises:
        SpecParseError: If *ref* is not a fragment pointer or does not resolve.
    """
    if ref in ("", "#"):
        return root
    if not ref.startswith("#/"):
        raise SpecParseError(f"Invalid JSON pointer in $ref: {ref}")

    target: Any = root
    for raw_segment in ref[2:].split("/"):
        segment = raw_segment.replace("~1", "/").replace("~0", "~")
        if isinstance(target, dict):
            if segment not in target:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found"
                )
            target = target[segment]
        elif isinstance(target, list):
            try:
                target = target[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot descend into {type(target).__name__}"
            )
    return target


class _RefResolver:
    """Expands references, caching every document by its location."""

    def __init__(self, documents: dict[str, Any]) -> None:
        self._documents = documents

    def expand(self, node: Any, location: str, active: frozenset[str]) -> Any:
        """Recursively expand references below *node*.

        *location* is the document *node* belongs to.  *active* holds the
        references being expanded on the current branch; each branch gets
        its own set so siblings pointing at the same target are both
        expanded.
        """
        if isinstance(node, list):
            return [self.expand(item, location, active) for item in node]

        if not isinstance(node, dict):
            return node

        ref = node.get("$ref")
        if isinstance(ref, str):
            uri, _, fragment = ref.partition("#")
            target_location = _join_location(location, uri) if uri else location
            key = f"{target_location}#{fragment}"
            if key in active:
                return node
            target = resolve_pointer(f"#{fragment}", self._document(target_location))
            return self.expand(target, target_location, active | {key})

        return {key: self.expand(value, location, active) for key, value in node.items()}

    def _document(self, location: str) -> Any:
        if location not in self._documents:
            debug(f"Loading referenced document {location}")
            self._documents[location] = load_spec(location)
        return self._documents[location]


def _normalize_location(source: str) -> str:
    if source.startswith(_URL_PREFIXES):
        return source
    return os.path.abspath(source)


def _join_location(location: str, uri: str) -> str:
    """Resolve the document part of a reference against *location*."""
    if uri.startswith(_URL_PREFIXES):
        return uri
    if location.startswith(_URL_PREFIXES):
        return urljoin(location, uri)
    base_dir = Path(location).parent if location else Path.cwd()
    return os.path.normpath(str(base_dir / uri))
