"""OpenAPI spec parser -- load, resolve ``$ref`` pointers, and extract routes.

This sub-package is the first half of the openapi2lua pipeline: turning a raw
OpenAPI document (JSON or YAML, local file, remote URL, or stdin) into the
flat ``path -> method -> operation`` map that
:func:`~openapi2lua.generator.tree.build_tree` consumes.

Typical usage::

    from openapi2lua.parser import extract_paths, load_spec, resolve_refs, validate_spec_version

    raw = load_spec("https://petstore3.swagger.io/api/v3/openapi.json")
    validate_spec_version(raw)
    paths = extract_paths(resolve_refs(raw))

Sub-modules:

* :mod:`~openapi2lua.parser.loader` -- I/O layer (URL, file, stdin) plus
  format detection and version validation.
* :mod:`~openapi2lua.parser.resolver` -- Recursive ``$ref`` resolution
  (internal, file and URL references) with circular-reference detection.
* :mod:`~openapi2lua.parser.extractor` -- Reduces path items to their
  operations.
"""

from openapi2lua.parser.extractor import extract_paths
from openapi2lua.parser.loader import load_spec, validate_spec_version
from openapi2lua.parser.resolver import resolve_refs

__all__ = ["load_spec", "validate_spec_version", "resolve_refs", "extract_paths"]
