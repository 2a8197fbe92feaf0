"""Starting the autostart and theme scripts, and keeping track of child processes."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Iterable, Iterator
from pathlib import Path

from leftwm.paths import BaseDirectories

logger = logging.getLogger(__name__)


def _run_script(path: Path) -> subprocess.Popen[bytes]:
    return subprocess.Popen(
        [os.fspath(path)],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )


class Nanny:
    """Runs the global ``up`` scripts and the current theme's ``up`` script."""

    @staticmethod
    def _config_dir() -> Path:
        return BaseDirectories("leftwm").place_config_file("up").parent

    @classmethod
    def run_global_up_script(cls) -> subprocess.Popen[bytes]:
        """Run every ``*.up`` script in name order, then the ``up`` script itself.

        Failing ``*.up`` scripts are logged; a failing ``up`` script raises OSError.
        """
        config_dir = cls._config_dir()
        scripts = sorted(
            entry for entry in config_dir.iterdir() if entry.suffix == ".up"
        )
        for script in scripts:
            try:
                _run_script(script)
            except OSError as err:
                logger.error("Unable to run script %s, error: %s", script, err)
        return _run_script(config_dir / "up")

    @classmethod
    def boot_current_theme(cls) -> subprocess.Popen[bytes]:
        """Run the ``up`` script of the current theme."""
        return _run_script(cls._config_dir() / "themes" / "current" / "up")


class Children:
    """Child processes keyed by process id."""

    def __init__(self, children: Iterable[subprocess.Popen] = ()):
        self._inner: dict[int, subprocess.Popen] = {}
        self.extend(children)

    def __len__(self) -> int:
        return len(self._inner)

    def __iter__(self) -> Iterator[subprocess.Popen]:
        return iter(self._inner.values())

    def __contains__(self, pid: object) -> bool:
        return pid in self._inner

    def insert(self, child: subprocess.Popen) -> bool:
        """Add ``child``; True if its process id was not known yet."""
        is_new = child.pid not in self._inner
        self._inner[child.pid] = child
        return is_new

    def merge(self, other: Children) -> None:
        """Take over every child of ``other``."""
        self._inner.update(other._inner)

    def extend(self, children: Iterable[subprocess.Popen]) -> None:
        """Add several children."""
        for child in children:
            self._inner[child.pid] = child

    def remove_finished_children(self) -> None:
        """Forget every child that has exited."""
        self._inner = {
            pid: child for pid, child in self._inner.items() if child.poll() is None
        }


def exec_shell(command: str, children: Children) -> int | None:
    """Start ``command`` with no standard streams; its pid, or None if it cannot start."""
    try:
        child = subprocess.Popen(
            [command],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError:
        return None
    children.insert(child)
    return child.pid