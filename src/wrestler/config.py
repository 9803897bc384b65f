"""Configuration management: XDG paths, profiles, and base-URL precedence.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD
  (``$XDG_CONFIG_HOME/wrestler/``), ``~/.wrestler/`` on macOS and Windows.
  See :func:`get_config_dir` and :func:`get_data_dir`.
* **Profiles** -- one JSON file per API target under ``profiles/``, each
  deserialised into a :class:`~wrestler.models.Profile`.
* **Precedence resolution** -- :func:`resolve_profile` and
  :func:`resolve_base_url` merge CLI flags, environment variables and the
  stored profile.

Profile files are written atomically (temp file, then rename).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from wrestler.exceptions import ConfigError
from wrestler.models import Profile

_APP_NAME = "wrestler"

ENV_PROFILE = "WRESTLER_PROFILE"
ENV_BASE_URL = "WRESTLER_BASE_URL"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from *env_var*, falling back to ``$HOME/<segments>``."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/wrestler/`` (default
    ``~/.config/wrestler/``). Elsewhere: ``~/.wrestler/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/wrestler/`` (default
    ``~/.local/share/wrestler/``). Elsewhere: ``~/.wrestler/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_profiles_dir() -> Path:
    """Return ``<config_dir>/profiles/``, creating it if necessary."""
    path = get_config_dir() / "profiles"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* via a temp file in the same directory and ``os.replace``.

    The temp file is removed if anything fails before the rename.
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


# --- Profiles ---


def _profile_path(name: str) -> Path:
    if not name or "/" in name or "\\" in name or name.startswith("."):
        raise ConfigError(f"Invalid profile name: {name!r}")
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    """Return all stored profile names, sorted alphabetically."""
    return sorted(p.stem for p in get_profiles_dir().glob("*.json") if p.is_file())


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


def load_profile(name: str) -> Profile:
    """Load and validate the profile called *name*.

    Raises:
        ConfigError: If the profile does not exist, contains invalid JSON,
            or fails validation.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return Profile.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid profile '{name}' at {path}: {exc}") from exc


def save_profile(profile: Profile) -> Path:
    """Persist *profile* atomically and return the file path."""
    path = _profile_path(profile.name)
    data = profile.model_dump(mode="json")
    _atomic_write(path, json.dumps(data, indent=2) + "\n")
    return path


def delete_profile(name: str) -> None:
    """Delete the profile called *name*.

    Raises:
        ConfigError: If the profile does not exist.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    path.unlink()


# --- Precedence resolution ---


def resolve_profile(cli_profile: Optional[str] = None) -> Optional[Profile]:
    """Pick the active profile.

    Precedence (high to low): the ``--profile`` flag, the
    ``WRESTLER_PROFILE`` environment variable, and finally the only stored
    profile when exactly one exists.

    Returns:
        The loaded profile, or ``None`` when nothing selects one.
    """
    name = cli_profile or os.environ.get(ENV_PROFILE) or None
    if name is None:
        profiles = list_profiles()
        if len(profiles) != 1:
            return None
        name = profiles[0]
    return load_profile(name)


def resolve_base_url(
    cli_base_url: Optional[str] = None,
    profile: Optional[Profile] = None,
) -> str:
    """Resolve the base URL: ``--base-url`` > ``WRESTLER_BASE_URL`` > profile.

    Raises:
        ConfigError: If no source provides a base URL.
    """
    if cli_base_url is not None:
        return cli_base_url
    env_base_url = os.environ.get(ENV_BASE_URL)
    if env_base_url:
        return env_base_url
    if profile is not None:
        return profile.base_url
    raise ConfigError(
        f"No base URL: pass --base-url, set {ENV_BASE_URL}, or select a profile"
    )
