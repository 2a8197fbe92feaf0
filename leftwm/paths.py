"""Locating programs and configuration, state and runtime files."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path

_VARIABLE = re.compile(r"\$(?:\{([^}]*)\}|([A-Za-z_][A-Za-z0-9_]*))")


def is_program_in_path(program: str) -> bool:
    """True if ``program`` exists in one of the directories listed in ``PATH``."""
    search_path = os.environ.get("PATH")
    if search_path is None:
        return False
    return any(
        os.path.exists(f"{directory}/{program}")
        for directory in search_path.split(":")
    )


def _expand(path: str, environ: Mapping[str, str]) -> str:
    """Expand a leading ``~`` and ``$VAR``/``${VAR}``; raise KeyError for unset variables."""

    def substitute(match: re.Match[str]) -> str:
        name = match.group(1) if match.group(1) is not None else match.group(2)
        value = environ.get(name)
        if value is None:
            raise KeyError(name)
        return value

    expanded = _VARIABLE.sub(substitute, path)
    if expanded == "~" or expanded.startswith("~/"):
        home = environ.get("HOME") or str(Path.home())
        expanded = home + expanded[1:]
    return expanded


def absolute_path(path: str) -> Path | None:
    """Expand ``path`` like a shell would and resolve it; None if it cannot be resolved."""
    try:
        expanded = _expand(path, os.environ)
    except KeyError:
        return None
    if not expanded:
        return None
    try:
        return Path(os.path.realpath(expanded, strict=True))
    except OSError:
        return None


def _directory_from(env: Mapping[str, str], variable: str, fallback: Path) -> Path:
    value = env.get(variable)
    if value and Path(value).is_absolute():
        return Path(value)
    return fallback


class BaseDirectories:
    """XDG base directories, with every path placed below ``prefix``."""

    def __init__(self, prefix: str = "", environ: Mapping[str, str] | None = None):
        env = os.environ if environ is None else environ
        self.prefix = Path(prefix)
        home_value = env.get("HOME")
        home = Path(home_value) if home_value else Path.home()
        self.config_home = _directory_from(env, "XDG_CONFIG_HOME", home / ".config")
        self.state_home = _directory_from(
            env, "XDG_STATE_HOME", home / ".local" / "state"
        )
        config_dirs = [
            Path(entry)
            for entry in env.get("XDG_CONFIG_DIRS", "").split(":")
            if entry and Path(entry).is_absolute()
        ]
        self.config_dirs = config_dirs or [Path("/etc/xdg")]
        runtime = env.get("XDG_RUNTIME_DIR")
        self.runtime_dir = (
            Path(runtime) if runtime and Path(runtime).is_absolute() else None
        )

    def _place(self, base: Path, name: str | os.PathLike[str]) -> Path:
        path = base / self.prefix / name
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    def _config_bases(self) -> list[Path]:
        return [self.config_home, *self.config_dirs]

    def place_config_file(self, name: str | os.PathLike[str]) -> Path:
        """Path for ``name`` in the config home, creating its parent directories."""
        return self._place(self.config_home, name)

    def find_config_file(self, name: str | os.PathLike[str]) -> Path | None:
        """The first existing ``name`` in the config home or the config directories."""
        for base in self._config_bases():
            candidate = base / self.prefix / name
            if candidate.exists():
                return candidate
        return None

    def list_config_files(self, name: str | os.PathLike[str]) -> list[Path]:
        """Every entry of the directories called ``name`` across all config locations."""
        found: list[Path] = []
        for base in self._config_bases():
            directory = base / self.prefix / name
            if directory.is_dir():
                found.extend(sorted(directory.iterdir()))
        return found

    def place_runtime_file(self, name: str | os.PathLike[str]) -> Path:
        """Path for ``name`` in the runtime directory, creating its parents."""
        if self.runtime_dir is None:
            raise OSError("XDG_RUNTIME_DIR is not set")
        return self._place(self.runtime_dir, name)

    def find_runtime_file(self, name: str | os.PathLike[str]) -> Path | None:
        """``name`` in the runtime directory if it exists there."""
        if self.runtime_dir is None:
            return None
        candidate = self.runtime_dir / self.prefix / name
        return candidate if candidate.exists() else None

    def place_state_file(self, name: str | os.PathLike[str]) -> Path:
        """Path for ``name`` in the state home, creating its parent directories."""
        return self._place(self.state_home, name)