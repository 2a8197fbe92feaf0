"""The ``leftwm`` command: starts the session or hands off to a ``leftwm-*`` program."""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from collections.abc import Sequence
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from leftwm.desktop_entry import autostart, remove_finished_children

SUBCOMMAND_PREFIX = "leftwm-"
AVAILABLE_SUBCOMMANDS: tuple[tuple[str, str], ...] = (
    ("check", "Check syntax of the configuration file"),
    ("command", "Send external commands to LeftWM"),
    ("state", "Print the current state of LeftWM"),
    ("theme", "Manage LeftWM themes"),
    ("config", "Manage LeftWM configuration file"),
    ("log", "Retrieves information logged by leftwm-worker"),
)

_ABOUT = (
    "Starts LeftWM if no arguments are supplied. If a subcommand is given, executes "
    "the corresponding leftwm program, e.g. 'leftwm theme' will execute "
    "'leftwm-theme', if it is installed."
)
_CRASH_MESSAGE = (
    "Leftwm crashed due to an unexpected error.\n"
    "Please create a new issue and post its log if possible.\n"
    "\n"
    "NOTE: You can restart leftwm with `startx`."
)
_POLL_SECONDS = 1.0


def _version() -> str:
    try:
        return version("leftwm")
    except PackageNotFoundError:
        return "0.0.0"


def is_subcommand(name: str) -> bool:
    """True if ``leftwm-<name>`` is one of the known programs."""
    return any(entry == name for entry, _ in AVAILABLE_SUBCOMMANDS)


def help_text() -> str:
    """The text printed by ``leftwm --help``."""
    commands = [*AVAILABLE_SUBCOMMANDS, ("help", "Print this message or the help of the given subcommand(s)")]
    width = max(len(name) for name, _ in commands)
    lines = [
        f"leftwm {_version()}",
        _ABOUT,
        "",
        "Usage: leftwm [COMMAND]",
        "",
        "Commands:",
        *(f"  {name.ljust(width)}  {about}" for name, about in commands),
        "",
        "Options:",
        "  -h, --help     Print help",
        "  -v, --version  Print version",
    ]
    return "\n".join(lines) + "\n"


def execute_subcommand(subcommand: str, args: Sequence[str]) -> int:
    """Run ``leftwm-<subcommand>`` with ``args`` and return its exit code."""
    try:
        child = subprocess.Popen([f"{SUBCOMMAND_PREFIX}{subcommand}", *args])
    except OSError as err:
        print(f"Failed to execute {subcommand}. {err}", file=sys.stderr)
        return 1
    code = child.wait()
    return code if code >= 0 else 0


def _parse_subcommands(args: Sequence[str]) -> int:
    subcommand, rest = args[0], list(args[1:])
    if is_subcommand(subcommand):
        return execute_subcommand(subcommand, rest)
    if subcommand == "help":
        if not rest:
            print(help_text(), end="")
        elif is_subcommand(rest[0]):
            return execute_subcommand(rest[0], ["--help"])
        else:
            print("No such subcommand. Try 'leftwm --help' to find valid subcommands.")
    elif subcommand in ("--version", "-v"):
        print(f"leftwm {_version()}")
    else:
        print(help_text(), end="")
    return 0


def _set_env_vars() -> None:
    os.environ["XDG_CURRENT_DESKTOP"] = "LeftWM"
    # Lets Java applications repaint correctly.
    os.environ["_JAVA_AWT_WM_NONREPARENTING"] = "1"


def _current_exe() -> Path:
    arg0 = sys.argv[0] if sys.argv and sys.argv[0] else "leftwm"
    if os.sep not in arg0:
        found = shutil.which(arg0)
        if found is not None:
            arg0 = found
    return Path(arg0).resolve()


def _start_lefthk(current_exe: Path) -> subprocess.Popen[bytes] | None:
    lefthk = current_exe.with_name("lefthk-worker")
    if not lefthk.exists():
        return None
    return subprocess.Popen([os.fspath(lefthk)])


def _kill_lefthk(session: subprocess.Popen[bytes]) -> None:
    try:
        session.kill()
    except OSError:
        return
    session.wait()


def start_leftwm() -> int:
    """Run ``leftwm-worker`` until it fails, restarting it when it exits cleanly.

    Returns the exit code to leave with.
    """
    current_exe = _current_exe()
    _set_env_vars()
    children = autostart()

    while True:
        session = subprocess.Popen([os.fspath(current_exe.with_name("leftwm-worker"))])
        lefthk = _start_lefthk(current_exe)
        while True:
            try:
                session.wait(timeout=_POLL_SECONDS)
                break
            except subprocess.TimeoutExpired:
                remove_finished_children(children)
        # A hotkey daemon must not outlive the session it belongs to.
        if lefthk is not None:
            _kill_lefthk(lefthk)
        status = session.returncode
        if status != 0:
            break

    print(_CRASH_MESSAGE)
    return status if status > 0 else 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the ``leftwm`` command."""
    args = list(sys.argv[1:] if argv is None else argv)
    if args:
        return _parse_subcommands(args)
    return start_leftwm()


if __name__ == "__main__":
    sys.exit(main())