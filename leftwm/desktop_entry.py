"""Autostart of desktop entries found in the XDG autostart directories."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from leftwm.paths import BaseDirectories

logger = logging.getLogger(__name__)

_MAIN_SECTION = "[Desktop Entry]"


def _split_to_set(value: str) -> frozenset[str]:
    return frozenset(part.strip() for part in value.split(";") if part.strip())


def _str_bool(value: str) -> bool | None:
    return {"true": True, "false": False}.get(value.lower())


@dataclass(frozen=True)
class DesktopEntry:
    """The keys of a ``.desktop`` file that matter for autostart."""

    exec: str | None = None
    path: Path | None = None
    only_show_in: frozenset[str] | None = None
    not_show_in: frozenset[str] | None = None
    hidden: bool = False

    @classmethod
    def parse(cls, content: str) -> DesktopEntry:
        """Read the ``[Desktop Entry]`` section; other sections are ignored."""
        values: dict[str, object] = {}
        in_main_section = False
        for raw_line in content.splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("["):
                if line == _MAIN_SECTION:
                    in_main_section = True
                    continue
                in_main_section = False
            if not in_main_section:
                continue
            key, sep, value = line.partition("=")
            if not sep:
                continue
            match key:
                case "Exec":
                    values["exec"] = value
                case "Path":
                    values["path"] = Path(value)
                case "OnlyShowIn":
                    values["only_show_in"] = _split_to_set(value)
                case "NotShowIn":
                    values["not_show_in"] = _split_to_set(value)
                case "Hidden":
                    values["hidden"] = bool(_str_bool(value))
        return cls(**values)

    @classmethod
    def parse_file(cls, path: str | os.PathLike[str]) -> DesktopEntry:
        """Read and parse the desktop file at ``path``."""
        return cls.parse(Path(path).read_text(encoding="utf-8"))


def remove_field_codes(exec_line: str) -> str:
    """Drop field codes such as ``%u`` from an Exec value.

    ``%%`` becomes ``%``; a ``%`` at the end or before a character that is
    neither a letter nor ``%`` is left as it is.
    """
    result: list[str] = []
    chars = iter(exec_line)
    for char in chars:
        if char != "%":
            result.append(char)
            continue
        following = next(chars, None)
        if following is None or following == "%":
            result.append("%")
        elif not (following.isascii() and following.isalpha()):
            result.append("%" + following)
    return "".join(result)


class BootFailure(Enum):
    """Why a desktop entry was not started."""

    EXECUTE = "execute"
    NOT_FOR_THIS_DESKTOP = "not_for_this_desktop"
    HIDDEN = "hidden"
    NO_EXEC = "no_exec"


class EntryBootError(Exception):
    """A desktop entry that could not or should not be started."""

    def __init__(self, reason: BootFailure, message: str):
        self.reason = reason
        super().__init__(message)


def _not_for_this_desktop(current: str) -> EntryBootError:
    return EntryBootError(
        BootFailure.NOT_FOR_THIS_DESKTOP, f'invalid desktop (current "{current}")'
    )


def boot_desktop_file(path: str | os.PathLike[str]) -> subprocess.Popen[bytes]:
    """Start the program of the desktop entry at ``path`` through ``sh -c``."""
    try:
        entry = DesktopEntry.parse_file(path)
    except (OSError, UnicodeDecodeError) as err:
        raise EntryBootError(BootFailure.EXECUTE, f"execute failed: {err}") from err

    current = os.environ.get("XDG_CURRENT_DESKTOP", "")
    if entry.only_show_in is not None and current not in entry.only_show_in:
        raise _not_for_this_desktop(current)
    if entry.not_show_in is not None and current in entry.not_show_in:
        raise _not_for_this_desktop(current)
    if entry.hidden:
        raise EntryBootError(BootFailure.HIDDEN, "entry hidden")
    if entry.exec is None:
        raise EntryBootError(BootFailure.NO_EXEC, "no exec")

    if entry.path is not None:
        working_dir = entry.path
    else:
        try:
            working_dir = Path.home()
        except RuntimeError:
            working_dir = Path(".")

    try:
        return subprocess.Popen(
            ["sh", "-c", remove_field_codes(entry.exec)],
            cwd=working_dir,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as err:
        raise EntryBootError(BootFailure.EXECUTE, f"execute failed: {err}") from err


def _autostart_files() -> list[Path]:
    seen: set[str] = set()
    files: list[Path] = []
    for path in BaseDirectories().list_config_files("autostart"):
        if path.name in seen:
            continue
        seen.add(path.name)
        files.append(path)
    return files


def autostart() -> list[subprocess.Popen[bytes]]:
    """Start every eligible ``.desktop`` file of the autostart directories.

    A file in the user's config home hides one of the same name in the
    system config directories.
    """
    children: list[subprocess.Popen[bytes]] = []
    for path in _autostart_files():
        if path.suffix != ".desktop":
            continue
        try:
            children.append(boot_desktop_file(path))
        except EntryBootError as err:
            logger.debug("Not starting %s: %s", path, err)
    return children


def remove_finished_children(children: list[subprocess.Popen]) -> None:
    """Drop the children that have exited from ``children``, in place."""

    def running(child: subprocess.Popen) -> bool:
        try:
            return child.poll() is None
        except OSError:
            return True

    children[:] = [child for child in children if running(child)]