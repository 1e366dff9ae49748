"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~openapi2lua.exceptions.Openapi2LuaError` subclass.
Build scripts can inspect the exit code to tell a broken spec apart from an
unwritable output path without parsing stderr.

Example::

    $ openapi2lua --spec broken.yaml
    $ echo $?
    3   # EXIT_SPEC_PARSE_ERROR -- the spec could not be loaded
"""

EXIT_SUCCESS = 0
"""The client was generated successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_SPEC_PARSE_ERROR = 3
"""The OpenAPI specification could not be loaded, parsed, or dereferenced."""

EXIT_WRITE_FAILURE = 4
"""The generated client could not be written to its destination."""
