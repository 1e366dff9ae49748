"""Exception hierarchy for openapi2lua.

All exceptions inherit from :class:`Openapi2LuaError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`openapi2lua.exit_codes`.
The CLI command catches ``Openapi2LuaError`` and exits with the appropriate
code, while unexpected exceptions produce a crash log and exit with
:data:`EXIT_GENERIC_FAILURE`.

The generator core (:mod:`openapi2lua.generator`) never raises these; they
belong to the loading, configuration, and output layers around it.

Subclass hierarchy::

    Openapi2LuaError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- SpecParseError      (exit 3)
    +-- OutputWriteError    (exit 4)
    +-- ConfigError         (exit 1)
"""

from openapi2lua.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_WRITE_FAILURE,
)


class Openapi2LuaError(Exception):
    """Base exception for all openapi2lua errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`openapi2lua.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(Openapi2LuaError):
    """Raised for invalid CLI arguments or option combinations."""

    exit_code = EXIT_INVALID_USAGE


class SpecParseError(Openapi2LuaError):
    """Raised when the OpenAPI spec cannot be loaded, parsed, or dereferenced."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class OutputWriteError(Openapi2LuaError):
    """Raised when the generated Lua source cannot be written to disk."""

    exit_code = EXIT_WRITE_FAILURE


class ConfigError(Openapi2LuaError):
    """Raised for configuration problems (invalid project file or values)."""

    exit_code = EXIT_GENERIC_FAILURE
