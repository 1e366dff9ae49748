"""Configuration resolution, XDG data paths, and atomic file writes.

This module handles everything openapi2lua reads or writes outside the spec
itself:

* **Data directory** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.openapi2lua/logs`` on macOS and Windows. Crash logs land here. See
  :func:`get_data_dir`.
* **Project config** -- an optional ``./openapi2lua.json`` holding
  :class:`~openapi2lua.models.GeneratorConfig` fields, so a repository can
  pin its spec path, output file, and client name.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, the project file, and defaults.
* **Atomic writes** -- :func:`atomic_write` writes the generated client via
  a temp file and rename so an interrupted run never leaves a half-written
  module behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from openapi2lua.exceptions import ConfigError
from openapi2lua.models import GeneratorConfig

_APP_NAME = "openapi2lua"
_PROJECT_CONFIG_FILENAME = "openapi2lua.json"

ENV_SPEC = "OPENAPI2LUA_SPEC"
ENV_OUT = "OPENAPI2LUA_OUT"
ENV_NAME = "OPENAPI2LUA_NAME"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/openapi2lua/`` (default
    ``~/.local/share/openapi2lua/``).
    On macOS/Windows: ``~/.openapi2lua/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* atomically using temp file + rename.

    Parent directories are created as needed.  The temporary file lives in
    the same directory as *path* so that ``os.replace`` is an atomic rename
    on POSIX systems; on any failure it is removed again.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./openapi2lua.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(
            f"Invalid project config at {path}: expected a JSON object"
        )
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_spec: Optional[str] = None,
    cli_out: Optional[str] = None,
    cli_name: Optional[str] = None,
    cli_header_support: Optional[bool] = None,
    cli_query_support: Optional[bool] = None,
    cli_receiver_call: Optional[bool] = None,
) -> GeneratorConfig:
    """Resolve the generator config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_*`` arguments that are not ``None``)
        2. Environment variables (``OPENAPI2LUA_SPEC``, ``OPENAPI2LUA_OUT``,
           ``OPENAPI2LUA_NAME``)
        3. Project config (``./openapi2lua.json``)
        4. Defaults from :class:`~openapi2lua.models.GeneratorConfig`

    Returns:
        The validated :class:`~openapi2lua.models.GeneratorConfig`.

    Raises:
        ConfigError: If the project file is invalid or the merged values
            fail validation.
    """
    # 4 + 3. Defaults overlaid with the project file.
    values: dict[str, Any] = dict(load_project_config() or {})

    # 2. Environment variables
    for field, env_var in (("spec", ENV_SPEC), ("out", ENV_OUT), ("name", ENV_NAME)):
        env_value = os.environ.get(env_var)
        if env_value:
            values[field] = env_value

    # 1. CLI flags
    cli_values = {
        "spec": cli_spec,
        "out": cli_out,
        "name": cli_name,
        "header_support": cli_header_support,
        "query_support": cli_query_support,
        "receiver_call": cli_receiver_call,
    }
    values.update({key: value for key, value in cli_values.items() if value is not None})

    try:
        return GeneratorConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
