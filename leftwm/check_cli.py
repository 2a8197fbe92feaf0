"""The ``leftwm-check`` program: checks the configuration, environment and theme."""

from __future__ import annotations

import argparse
import os
import re
import sys
import tomllib
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import fields, is_dataclass
from enum import Enum
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any

from leftwm import ron
from leftwm.config import Config, parse_config_text
from leftwm.keybind import Keybind, KeybindError, Modifier, check_mousekey
from leftwm.modmask import into_mod
from leftwm.paths import BaseDirectories, is_program_in_path
from leftwm.ron import RonError
from leftwm.theme_config import ThemeConfig

_INFO = "\x1b[0;94m::\x1b[0m"
_RESET = "\x1b[0m"
_EXPECTED_THEME_FILES = ("up", "down", "theme.ron")
_REQUIRED_BINARIES = (
    "leftwm",
    "leftwm-worker",
    "leftwm-state",
    "leftwm-command",
    "leftwm-check",
)
_ENABLED_FEATURES = ("lefthk",)
_CONFIG_HEADER = "// LeftWM configuration\n// A WindowManager for Adventurers\n\n"


class CheckError(Exception):
    """A check that found a problem."""


def _ok(message: str) -> None:
    print(f"\x1b[0;92m    -> {message} {_RESET}")


def _warn(message: str) -> None:
    print(f"\x1b[1;93mWARN: {message}{_RESET}")


def _print_error(message: object) -> None:
    print(f"\x1b[1;91mERROR:{_RESET}\x1b[1m {message} {_RESET}")


def _version() -> str:
    try:
        return version("leftwm")
    except PackageNotFoundError:
        return "0.0.0"


def check_binary(binary: str, verbose: bool) -> None:
    """Raise CheckError unless ``binary`` exists in a ``PATH`` directory."""
    search_path = os.environ.get("PATH")
    if search_path is None:
        raise CheckError(
            "Binaries not checked. This is an error with leftwm-check, "
            "we would appreciate a bug report."
        )
    for directory in search_path.split(":"):
        candidate = f"{directory}/{binary}"
        if Path(candidate).exists():
            if verbose:
                print(f"In search for binaries, found {candidate}")
            return
    raise CheckError(f"Could not find binary {binary} in PATH")


def check_binaries(verbose: bool) -> None:
    """Check that every required program is installed; raise CheckError if not."""
    print(f"{_INFO} Checking for leftwm binaries . . .")
    failures = False
    for binary in _REQUIRED_BINARIES:
        try:
            check_binary(binary, verbose)
        except CheckError as err:
            failures = True
            _print_error(err)
    if failures:
        raise CheckError("Not all required binaries are present")
    _ok("Binaries OK")


def _check_enabled_features(verbose: bool) -> None:
    if not _ENABLED_FEATURES:
        print(f"{_INFO} Built with no enabled features.")
        return
    print(f"{_INFO} Enabled features: {' '.join(_ENABLED_FEATURES)}")
    print(f"{_INFO} Checking feature dependencies . . .")
    try:
        check_binary("lefthk-worker", verbose)
    except CheckError as err:
        raise CheckError(f"Check for feature lefthk failed: {err}") from err
    print(f"\x1b[0;92m    -> lefthk OK{_RESET}")


def check_elogind(verbose: bool) -> None:
    """Check for ``XDG_RUNTIME_DIR`` or ``loginctl``; raise CheckError if both are missing."""
    runtime_dir = os.environ.get("XDG_RUNTIME_DIR")
    has_loginctl = is_program_in_path("loginctl")
    if runtime_dir is not None:
        if has_loginctl:
            if verbose:
                print(f":: XDG_RUNTIME_DIR: {runtime_dir}, LOGINCTL OKAY")
            _ok("Environment OK")
        else:
            if verbose:
                print(f":: XDG_RUNTIME_DIR: {runtime_dir}, LOGINCTL not installed")
            _ok("Environment OK (has XDG_RUNTIME_DIR)")
        return
    if not has_loginctl:
        if verbose:
            print(":: XDG_RUNTIME_DIR_ERROR: not set, LOGINCTL BAD")
        raise CheckError(
            "Elogind not installed/operating and no alternative XDG_RUNTIME_DIR is set."
        )
    if verbose:
        print(":: XDG_RUNTIME_DIR: not set, LOGINCTL OKAY")
    _warn(
        "Elogind/systemd installed but XDG_RUNTIME_DIR not set.\n"
        "This may be because elogind isn't started. "
    )


def missing_expected_files(filepaths: Iterable[Path]) -> list[str]:
    """The names among ``up``, ``down`` and ``theme.ron`` that no path ends with."""
    names = {Path(path).name for path in filepaths}
    return [name for name in _EXPECTED_THEME_FILES if name not in names]


def check_permissions(path: Path, verbose: bool) -> Path:
    """Return ``path`` if it is an executable file; raise CheckError otherwise."""
    path = Path(path)
    metadata = path.stat()
    if path.is_file() and metadata.st_mode & 0o111:
        if verbose:
            print(f"Found `{path}` with executable permissions: True")
        return path
    raise CheckError(f"Found `{path}`, but missing executable permissions!")


def check_up_file(path: Path) -> None:
    """Raise CheckError if the ``up`` script still uses the deprecated commands pipe."""
    contents = Path(path).read_text(encoding="utf-8")
    if "leftwm/commands.pipe" in contents:
        raise CheckError(
            "`commands.pipe` is deprecated. See issue #652 of the project for a workaround."
        )


def _check_theme_file(path: Path, verbose: bool, kind: str) -> Path:
    path = Path(path)
    path.stat()
    contents = path.read_text(encoding="utf-8")
    if not path.is_file():
        raise CheckError(f"No `theme.{kind}` found at path: {path}")
    if verbose:
        print(f"Found: {path}")
    try:
        data = ron.loads(contents) if kind == "ron" else tomllib.loads(contents)
        ThemeConfig.from_mapping(data)
    except (RonError, ValueError) as err:
        raise CheckError(f"Could not parse theme file: {err}") from err
    if verbose:
        print("The theme file looks OK.")
    return path


def check_theme_ron(path: Path, verbose: bool) -> Path:
    """Return ``path`` if it holds a valid RON theme; raise CheckError otherwise."""
    return _check_theme_file(path, verbose, "ron")


def check_theme_toml(path: Path, verbose: bool) -> Path:
    """Return ``path`` if it holds a valid TOML theme; raise CheckError otherwise."""
    checked = _check_theme_file(path, verbose, "toml")
    _warn(
        "TOML as config format is about to be deprecated.\n"
        "      Please consider migrating to RON or contact the theme creator about this topic.\n"
        "      Note: make sure the `up` script is loading the correct theme file."
    )
    return checked


def check_theme_contents(filepaths: Sequence[Path], verbose: bool) -> bool:
    """Check the files of the current theme; print the problems and return whether it is OK."""
    problems = [f"File not found: {name}" for name in missing_expected_files(filepaths)]
    for path in map(Path, filepaths):
        try:
            match path.name:
                case "up":
                    check_up_file(check_permissions(path, verbose))
                case "down":
                    check_permissions(path, verbose)
                case "theme.toml":
                    check_theme_toml(path, verbose)
                case "theme.ron":
                    check_theme_ron(path, verbose)
        except (CheckError, OSError, UnicodeDecodeError) as err:
            problems.append(str(err))
    if not problems:
        _ok("Theme OK")
        return True
    for problem in problems:
        _print_error(problem)
    return False


def _check_current_theme_set(path: Path | None, verbose: bool) -> Path:
    if path is None:
        raise CheckError("No theme folder or symlink `current` found.")
    if verbose:
        if path.is_symlink():
            print(
                "Found symlink `current`, pointing to theme folder: "
                f"{os.readlink(path)!r}"
            )
        else:
            _warn(
                f"Found `current` theme folder: {str(path)!r}. "
                "Use of a symlink is recommended, instead."
            )
    return path


def check_theme(verbose: bool) -> bool:
    """Check that a current theme is set and that its files are valid."""
    try:
        base = BaseDirectories("leftwm/themes")
        _check_current_theme_set(base.find_config_file("current"), verbose)
        return check_theme_contents(base.list_config_files("current"), verbose)
    except (CheckError, OSError) as err:
        _print_error(err)
        return False


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Modifier):
        return list(value.to_list())
    if isinstance(value, re.Pattern):
        return value.pattern
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Keybind):
        return {
            "command": _plain(value.command),
            "value": value.value,
            "modifier": _plain(value.modifier),
            "key": value.key,
        }
    if is_dataclass(value) and not isinstance(value, type):
        return {field.name: _plain(getattr(value, field.name)) for field in fields(value)}
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def _write_config(ron_file: Path, config: Config) -> None:
    data = {
        field.name: _plain(getattr(config, field.name))
        for field in fields(config)
        if field.name != "theme_setting"
    }
    Path(ron_file).write_text(_CONFIG_HEADER + ron.dumps(data), encoding="utf-8")


def load_config_file(path: str | os.PathLike[str] | None, verbose: bool) -> Config:
    """Load the configuration from ``path``, or from the default location.

    Without a path, ``config.ron`` is preferred over ``config.toml``; if neither
    exists, the default configuration is written to ``config.ron`` and returned.
    """
    if path is not None:
        print(f"\x1b[1;35mNote: Using file {os.fspath(path)} {_RESET}")
        config_file = Path(path)
    else:
        base = BaseDirectories("leftwm")
        ron_file = base.place_config_file("config.ron")
        toml_file = base.place_config_file("config.toml")
        if ron_file.exists():
            config_file = ron_file
        elif toml_file.exists():
            _warn(
                "TOML as config format is about to be deprecated.\n"
                "      Please consider migrating to RON manually or by using `leftwm-check -m`."
            )
            config_file = toml_file
        else:
            config = Config()
            _write_config(ron_file, config)
            return config

    if verbose:
        print(f"config_filename = {str(config_file)!r}")
    contents = config_file.read_text(encoding="utf-8")
    if verbose:
        print(f"contents = {contents!r}")
    return parse_config_text(contents, config_file.suffix)


def _check_keybinds(config: Config, verbose: bool) -> None:
    print(f"{_INFO} Checking keybinds . . .")
    problems: list[tuple[Keybind | None, str]] = []
    bindings: dict[tuple[tuple[str, ...], str], Any] = {}
    scratchpad_names = [pad.get("name") for pad in config.scratchpad or ()]
    for keybind in config.keybind:
        if verbose:
            print(f"Keybind: {keybind!r} value field is empty: {not keybind.value}")
        try:
            keybind.validate(scratchpad_names, config.layouts)
        except KeybindError as err:
            problems.append((keybind, str(err)))
        modifier = keybind.modifier if keybind.modifier is not None else Modifier("None")
        names = list(modifier.to_list())
        for name in names:
            if name not in ("modkey", "mousekey") and into_mod(name) == 0:
                problems.append((keybind, f"Modifier `{name}` is not valid"))
        combination = (tuple(sorted(names)), keybind.key)
        previous = bindings.get(combination)
        if previous is not None:
            problems.append(
                (
                    None,
                    f"{_RESET}\x1b[1mMultiple commands bound to key combination "
                    f"{'+'.join(combination[0])} + {keybind.key}:"
                    f"\n\x1b[1;91m    -> {previous!r}"
                    f"\n    -> {keybind.command!r}"
                    f"\n{_RESET}Help: change one of the keybindings to something else.\n",
                )
            )
        bindings[combination] = keybind.command
    if not problems:
        print(f"\x1b[0;92m    -> All keybinds OK{_RESET}")
        return
    for binding, message in problems:
        if binding is not None:
            print(f"\x1b[1;91mERROR: {message} for keybind {binding!r}{_RESET}")
        else:
            print(f"\x1b[1;91mERROR: {message} {_RESET}")


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="leftwm-check", description="Checks syntax of the configuration file"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Outputs received configuration file."
    )
    parser.add_argument(
        "-m",
        "--migrate-toml-to-ron",
        dest="migrate",
        action="store_true",
        help=(
            "Migrates an existing `toml` based config to a `ron` based one. "
            "Keeps the old file for reference, please delete it manually."
        ),
    )
    parser.add_argument(
        "input",
        metavar="INPUT",
        nargs="?",
        help="Sets the input file to use. Uses first in PATH otherwise.",
    )
    return parser


def _migrate(verbose: bool) -> None:
    print(f"{_INFO} Migrating configuration . . .")
    base = BaseDirectories("leftwm")
    ron_file = base.place_config_file("config.ron")
    toml_file = base.place_config_file("config.toml")
    config = load_config_file(toml_file, verbose)
    _write_config(ron_file, config)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of ``leftwm-check``; returns the exit code."""
    args = _parser().parse_args(argv)
    verbose = args.verbose

    print(f"{_INFO} LeftWM version: {_version()}")
    print(f"{_INFO} LeftWM git hash: {os.environ.get('GIT_HASH', 'unknown')}")
    try:
        if args.migrate:
            _migrate(verbose)
            return 0

        for check in (_check_enabled_features, check_binaries):
            try:
                check(verbose)
            except CheckError as err:
                _print_error(err)

        print(f"{_INFO} Loading configuration . . .")
        try:
            config = load_config_file(args.input, verbose)
        except (OSError, ValueError, RonError) as err:
            print(f"\x1b[1;91mERROR:{_RESET}\x1b[1m Configuration failed. Reason: {err!r}")
        else:
            _ok("Configuration loaded OK")
            if verbose:
                print(repr(config))
            check_mousekey(config.mousekey, verbose)
            _check_keybinds(config, verbose)

        print(f"{_INFO} Checking environment . . .")
        check_elogind(verbose)
        print(f"{_INFO} Checking theme . . .")
        check_theme(verbose)
    except (CheckError, OSError, ValueError, RonError) as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())