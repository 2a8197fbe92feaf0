"""Keybind definitions, their validation and conversion into command lines."""

from __future__ import annotations

import re
from collections.abc import Collection, Iterable, Iterator
from dataclasses import dataclass

from leftwm.base_command import BaseCommand

_USIZE = re.compile(r"\+?[0-9]+")
_SIGNED = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)",
    re.IGNORECASE,
)
_FOCUS_BEHAVIORS = frozenset(
    {"", "goto_empty", "ignore_empty", "goto_used", "ignore_used", "default"}
)
_SCRATCHPAD_COMMANDS = frozenset(
    {
        BaseCommand.ToggleScratchPad,
        BaseCommand.AttachScratchPad,
        BaseCommand.NextScratchPadWindow,
        BaseCommand.PrevScratchPadWindow,
    }
)


def _is_usize(text: str) -> bool:
    return _USIZE.fullmatch(text) is not None


def _is_i8(text: str) -> bool:
    return _SIGNED.fullmatch(text) is not None and -128 <= int(text) <= 127


def _is_bool(text: str) -> bool:
    return text in ("true", "false")


def _is_float(text: str) -> bool:
    return _FLOAT.fullmatch(text) is not None


@dataclass(frozen=True)
class Modifier:
    """One modifier name or a list of them, as written in the configuration."""

    value: str | tuple[str, ...]

    @classmethod
    def from_value(cls, value: Modifier | str | Iterable[str]) -> Modifier:
        """Build a modifier from a string, a sequence of strings or another modifier."""
        if isinstance(value, Modifier):
            return value
        if isinstance(value, str):
            return cls(value)
        if isinstance(value, (list, tuple)):
            items = tuple(value)
            if all(isinstance(item, str) for item in items):
                return cls(items)
        raise TypeError(f"cannot build a modifier from {value!r}")

    @property
    def is_single(self) -> bool:
        return isinstance(self.value, str)

    def is_empty(self) -> bool:
        """True for an empty string or an empty list."""
        return len(self.value) == 0

    def to_list(self) -> list[str]:
        """The modifier names as a list."""
        return [self.value] if isinstance(self.value, str) else list(self.value)

    def sorted(self) -> Modifier:
        """A copy whose list of names is sorted; a single name is unchanged."""
        if isinstance(self.value, str):
            return self
        return Modifier(tuple(sorted(self.value)))

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_list())

    def __str__(self) -> str:
        if isinstance(self.value, str):
            return self.value
        return "+".join(self.value)


class KeybindError(ValueError):
    """A keybind whose value does not suit its command."""


@dataclass
class Keybind:
    """A key combination bound to a command with an optional argument."""

    command: BaseCommand
    key: str
    value: str = ""
    modifier: Modifier | None = None

    def validate(
        self, scratchpad_names: Iterable[str], layouts: Collection[str]
    ) -> None:
        """Raise KeybindError if the value is not acceptable for the command."""
        scratchpads = set(scratchpad_names)
        value = self.value
        has_value = value != ""
        command = self.command

        if command in (BaseCommand.Execute, BaseCommand.LoadTheme):
            if not has_value:
                raise KeybindError("value must not be empty")
        elif command in _SCRATCHPAD_COMMANDS:
            if value not in scratchpads:
                raise KeybindError("Value should be a correct scratchpad name")
        elif command is BaseCommand.ReleaseScratchPad:
            if not (not has_value or _is_usize(value) or value in scratchpads):
                raise KeybindError(
                    "Value should be empty, a window number or a valid scratchpad name"
                )
        elif command is BaseCommand.GotoTag:
            if not _is_usize(value):
                raise KeybindError("invalid index value for GotoTag")
        elif command is BaseCommand.FocusWindowTop:
            if has_value and not _is_bool(value):
                raise KeybindError("invalid boolean value for FocusWindowTop")
        elif command is BaseCommand.SwapWindowTop:
            if has_value and not _is_bool(value):
                raise KeybindError("invalid boolean value for SwapWindowTop")
        elif command is BaseCommand.MoveToTag:
            if not _is_usize(value):
                raise KeybindError("invalid index value for SendWindowToTag")
        elif command is BaseCommand.SetLayout:
            if value not in layouts:
                raise KeybindError("could not parse layout for command SetLayout")
        elif command is BaseCommand.IncreaseMainWidth:
            if not _is_i8(value):
                raise KeybindError("invalid width value for IncreaseMainWidth")
        elif command is BaseCommand.DecreaseMainWidth:
            if not _is_i8(value):
                raise KeybindError("invalid width value for DecreaseMainWidth")
        elif command is BaseCommand.SetMarginMultiplier:
            if not _is_float(value):
                raise KeybindError(
                    "invalid margin multiplier for SetMarginMultiplier"
                )
        elif command in (BaseCommand.FocusNextTag, BaseCommand.FocusPreviousTag):
            if has_value and not (_is_usize(value) or value in _FOCUS_BEHAVIORS):
                raise KeybindError(
                    "Value should be empty, or one of 'default', 'goto_empty', "
                    "'ignore_empty', 'goto_used', 'ignore_used'"
                )

    def to_command_line(
        self,
        scratchpad_names: Iterable[str],
        layouts: Collection[str],
        disable_current_tag_swap: bool,
    ) -> str:
        """Validate the keybind and return the shell command it runs."""
        self.validate(scratchpad_names, layouts)
        if self.command is BaseCommand.Execute:
            return self.value
        parts = self.command.command_name()
        if self.value:
            if self.command is BaseCommand.GotoTag:
                swap = str(not disable_current_tag_swap).lower()
                parts += f" {self.value} {swap}"
            else:
                parts += f" {self.value}"
        return f"leftwm-command '{parts}'\n"


def check_mousekey(mousekey: Modifier | None, verbose: bool) -> bool:
    """Report on the configured mouse modifier; False if it is set to nothing."""
    if verbose:
        print("Checking if mousekey is set.")
    if mousekey is not None:
        if verbose:
            print("Mousekey is set.")
        if mousekey.is_empty():
            print(
                "Your mousekey is set to nothing, this will cause windows to "
                "move/resize with just a mouse press."
            )
            return False
        if verbose:
            print("Mousekey is okay.")
    return True