"""End-to-end generation pipeline: spec source -> Lua source -> destination.

:func:`generate_client` runs every stage in order:

1. :func:`~openapi2lua.parser.load_spec` -- read the document.
2. :func:`~openapi2lua.parser.validate_spec_version` -- reject unsupported
   spec flavours early.
3. :func:`~openapi2lua.parser.resolve_refs` -- dereference ``$ref`` pointers.
4. :func:`~openapi2lua.parser.extract_paths` -- reduce to the route map.
5. :func:`~openapi2lua.generator.build_tree` and
   :func:`~openapi2lua.generator.emit_client` -- produce the Lua module.

:func:`write_client` then stores the result atomically, or prints it when the
destination is ``-``.
"""

from __future__ import annotations

from pathlib import Path

from openapi2lua.config import atomic_write
from openapi2lua.exceptions import OutputWriteError
from openapi2lua.generator import build_tree, emit_client
from openapi2lua.models import GeneratorConfig, PathTreeNode
from openapi2lua.output import debug, info, print_data, warning
from openapi2lua.parser import extract_paths, load_spec, resolve_refs, validate_spec_version


def generate_client(config: GeneratorConfig) -> str:
    """Load the spec named by *config* and return the generated Lua source.

    Raises:
        SpecParseError: If the spec cannot be loaded, validated, or
            dereferenced.
    """
    info("Parsing OpenAPI...")
    raw = load_spec(config.spec)
    version = validate_spec_version(raw)
    debug(f"Spec version: {version}")

    base = None if config.spec == "-" else config.spec
    routes = extract_paths(resolve_refs(raw, base=base))
    if not routes:
        warning("Spec defines no paths; the generated client has no operations.")

    tree = build_tree(routes)
    debug(
        f"Built path tree: {len(routes)} paths, "
        f"{_count_namespaces(tree)} namespaces, {_count_routes(tree)} operations"
    )

    return emit_client(tree, config.emit_options())


def write_client(source: str, out: str) -> None:
    """Write *source* to the file *out*, or to stdout when *out* is ``-``.

    Raises:
        OutputWriteError: If the file cannot be written.
    """
    if out == "-":
        print_data(source)
        return

    try:
        atomic_write(Path(out), source)
    except OSError as exc:
        raise OutputWriteError(f"Failed to write {out}: {exc}") from exc


def _count_namespaces(node: PathTreeNode) -> int:
    return sum(1 + _count_namespaces(child) for child in node.children.values())


def _count_routes(node: PathTreeNode) -> int:
    return len(node.methods) + sum(_count_routes(child) for child in node.children.values())
