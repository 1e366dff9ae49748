"""Lua identifier sanitizing and member-access helpers.

Path segments, parameter names, and method tokens from an OpenAPI spec are
arbitrary strings.  The helpers here turn them into valid Lua locals
(:func:`to_identifier`, :func:`to_unique_identifiers`) and choose between
``t.key`` and ``t["key"]`` when reaching a table member
(:func:`child_accessor`).

The keyword set and escape table are read-only module constants; nothing in
this module keeps state between calls.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from openapi2lua.models import UniqueIdentifiers

LUA_KEYWORDS = frozenset({
    "and",
    "break",
    "do",
    "else",
    "elseif",
    "end",
    "false",
    "for",
    "function",
    "goto",
    "if",
    "in",
    "local",
    "nil",
    "not",
    "or",
    "repeat",
    "return",
    "then",
    "true",
    "until",
    "while",
})
"""Reserved words of Lua 5.2+ (``goto`` included)."""

FALLBACK_IDENTIFIER = "param"

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_INVALID_CHAR_RE = re.compile(r"[^A-Za-z0-9_]")

_LUA_ESCAPES = str.maketrans({
    "\\": "\\\\",
    "\r": "\\r",
    "\n": "\\n",
    "\t": "\\t",
    '"': '\\"',
})


def is_lua_identifier(key: str) -> bool:
    """Return ``True`` if *key* can be used after a dot in Lua."""
    return _IDENTIFIER_RE.fullmatch(key) is not None and key not in LUA_KEYWORDS


def lua_string_literal(value: str) -> str:
    """Quote *value* as a double-quoted Lua string literal.

    Example::

        >>> lua_string_literal('say "hi"')
        '"say \\\\"hi\\\\""'
    """
    return '"' + str(value).translate(_LUA_ESCAPES) + '"'


def to_identifier(raw: str) -> str:
    """Sanitize *raw* into a valid Lua identifier.

    Every character outside ``[A-Za-z0-9_]`` becomes ``_``, a leading digit
    gets a ``_`` prefix, an empty result becomes ``param``, and keywords get
    a trailing ``_``.

    Example::

        >>> to_identifier("user-id")
        'user_id'
        >>> to_identifier("2fa")
        '_2fa'
        >>> to_identifier("end")
        'end_'
    """
    name = _INVALID_CHAR_RE.sub("_", str(raw))
    if name[:1].isdigit():
        name = "_" + name
    if not name:
        name = FALLBACK_IDENTIFIER
    if name in LUA_KEYWORDS:
        name = f"{name}_"
    return name


def to_unique_identifiers(
    raw_names: Sequence[str],
    reserved: Iterable[str] = (),
) -> UniqueIdentifiers:
    """Sanitize *raw_names* into pairwise distinct Lua identifiers.

    Names are processed in order.  When a sanitized name is already taken by
    an earlier entry (or appears in *reserved*), the suffixes ``_2``, ``_3``,
    ... are tried until a free one is found.

    Args:
        raw_names: Raw parameter names, one per path position.  The same raw
            name may appear more than once.
        reserved: Identifiers that must not be handed out, e.g. locals used
            by the surrounding generated code.

    Returns:
        A :class:`~openapi2lua.models.UniqueIdentifiers` whose ``ordered``
        list matches *raw_names* position by position.

    Example::

        >>> to_unique_identifiers(["id", "id"]).ordered
        ['id', 'id_2']
    """
    mapping: dict[str, str] = {}
    ordered: list[str] = []
    used = set(reserved)

    for raw in raw_names:
        base = to_identifier(raw)
        candidate = base
        suffix = 2
        while candidate in used:
            candidate = f"{base}_{suffix}"
            suffix += 1
        used.add(candidate)
        mapping[raw] = candidate
        ordered.append(candidate)

    return UniqueIdentifiers(mapping=mapping, ordered=ordered)


def child_accessor(parent_ref: str, raw_key: str) -> str:
    """Return the Lua expression reaching member *raw_key* of *parent_ref*.

    Example::

        >>> child_accessor("instance", "users")
        'instance.users'
        >>> child_accessor("instance", "user-groups")
        'instance["user-groups"]'
    """
    if is_lua_identifier(raw_key):
        return f"{parent_ref}.{raw_key}"
    return f"{parent_ref}[{lua_string_literal(raw_key)}]"
