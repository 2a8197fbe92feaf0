"""General configuration: options, window rules and default keybinds."""

from __future__ import annotations

import logging
import re
import tomllib
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from leftwm import ron
from leftwm.base_command import BaseCommand
from leftwm.keybind import Keybind, Modifier
from leftwm.paths import is_program_in_path
from leftwm.theme_config import ThemeConfig

logger = logging.getLogger(__name__)

STATE_FILE = Path("/tmp/leftwm.state")
DEFAULT_TAGS = ("1", "2", "3", "4", "5", "6", "7", "8", "9")
_WORKSPACES_NUM = 10

# Ordered from least to most common: an uncommon terminal that is installed
# was most likely installed on purpose.
_TERMINALS = (
    "alacritty",
    "termite",
    "kitty",
    "urxvt",
    "rxvt",
    "st",
    "roxterm",
    "eterm",
    "xterm",
    "terminator",
    "terminology",
    "gnome-terminal",
    "xfce4-terminal",
    "konsole",
    "uxterm",
    "guake",
)


def _default_terminal() -> str:
    return next(
        (terminal for terminal in _TERMINALS if is_program_in_path(terminal)),
        "termite",
    )


def _exit_strategy() -> str:
    if is_program_in_path("loginctl"):
        return "loginctl kill-session $XDG_SESSION_ID"
    return "pkill leftwm"


def _default_keybinds() -> list[Keybind]:
    cmd = BaseCommand
    table: list[tuple[BaseCommand, str, str, tuple[str, ...]]] = [
        (cmd.Execute, "p", "dmenu_run", ()),
        (cmd.Execute, "Return", _default_terminal(), ("Shift",)),
        (cmd.CloseWindow, "q", "", ("Shift",)),
        (cmd.SoftReload, "r", "", ("Shift",)),
        (cmd.Execute, "x", _exit_strategy(), ("Shift",)),
        (cmd.Execute, "l", "slock", ("Control",)),
        (cmd.MoveToLastWorkspace, "w", "", ("Shift",)),
        (cmd.SwapTags, "w", "", ()),
        (cmd.MoveWindowUp, "k", "", ("Shift",)),
        (cmd.MoveWindowDown, "j", "", ("Shift",)),
        (cmd.MoveWindowTop, "Return", "", ()),
        (cmd.FocusWindowUp, "k", "", ()),
        (cmd.FocusWindowDown, "j", "", ()),
        (cmd.NextLayout, "k", "", ("Control",)),
        (cmd.PreviousLayout, "j", "", ("Control",)),
        (cmd.FocusWorkspaceNext, "l", "", ()),
        (cmd.FocusWorkspacePrevious, "h", "", ()),
        (cmd.MoveWindowUp, "Up", "", ("Shift",)),
        (cmd.MoveWindowDown, "Down", "", ("Shift",)),
        (cmd.FocusWindowUp, "Up", "", ()),
        (cmd.FocusWindowDown, "Down", "", ()),
        (cmd.NextLayout, "Up", "", ("Control",)),
        (cmd.PreviousLayout, "Down", "", ("Control",)),
        (cmd.FocusWorkspaceNext, "Right", "", ()),
        (cmd.FocusWorkspacePrevious, "Left", "", ()),
    ]
    table += [(cmd.GotoTag, str(i), str(i), ()) for i in range(1, _WORKSPACES_NUM)]
    table += [
        (cmd.MoveToTag, str(i), str(i), ("Shift",)) for i in range(1, _WORKSPACES_NUM)
    ]
    return [
        Keybind(command, key, value, Modifier(("modkey", *extra)))
        for command, key, value, extra in table
    ]


def _default_scratchpads() -> list[dict[str, Any]]:
    return [
        {
            "name": "Alacritty",
            "value": "alacritty",
            "x": {"Pixel": 860},
            "y": {"Pixel": 390},
            "height": {"Pixel": 300},
            "width": {"Pixel": 200},
        }
    ]


@dataclass(frozen=True)
class WindowInfo:
    """The names a window is known by: ``WM_CLASS`` parts and titles."""

    res_class: str | None = None
    res_name: str | None = None
    legacy_name: str | None = None
    name: str | None = None


def _matches_any(pattern: re.Pattern[str], candidates: Iterable[str | None]) -> bool:
    # A match means removing the first match leaves nothing. An empty string
    # matches only a rule written for the empty string.
    return any(
        text is not None
        and pattern.sub("", text, count=1) == ""
        and (text != "" or pattern.pattern == "")
        for text in candidates
    )


def _compile(key: str, value: Any) -> re.Pattern[str] | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{key}: expected a string, got {value!r}")
    try:
        return re.compile(value)
    except re.error:
        return None


def _bool(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{key}: expected a boolean, got {value!r}")
    return value


def _str(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{key}: expected a string, got {value!r}")
    return value


def _index(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{key}: expected a non-negative integer, got {value!r}")
    return value


def _list(key: str, value: Any) -> list[Any]:
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"{key}: expected a list, got {value!r}")
    return list(value)


def _str_list(key: str, value: Any) -> list[str]:
    return [_str(key, item) for item in _list(key, value)]


def _mapping_list(key: str, value: Any) -> list[dict[str, Any]]:
    items = _list(key, value)
    for item in items:
        if not isinstance(item, Mapping):
            raise ValueError(f"{key}: expected a table, got {item!r}")
    return [dict(item) for item in items]


def _scratchpads(key: str, value: Any) -> list[dict[str, Any]]:
    items = _mapping_list(key, value)
    for item in items:
        _str(f"{key}.name", item.get("name"))
    return items


def _modifier(key: str, value: Any) -> Modifier:
    try:
        return Modifier.from_value(value)
    except TypeError as err:
        raise ValueError(f"{key}: {err}") from err


def _path(key: str, value: Any) -> Path:
    return Path(_str(key, value))


def _keybind(key: str, value: Any) -> Keybind:
    if not isinstance(value, Mapping):
        raise ValueError(f"{key}: expected a table, got {value!r}")
    try:
        command = BaseCommand(_str(f"{key}.command", value.get("command")))
    except ValueError as err:
        raise ValueError(f"{key}: unknown command {value.get('command')!r}") from err
    modifier = value.get("modifier")
    return Keybind(
        command=command,
        key=_str(f"{key}.key", value.get("key")),
        value=_str(f"{key}.value", value.get("value", "")),
        modifier=None if modifier is None else _modifier(f"{key}.modifier", modifier),
    )


def _keybinds(key: str, value: Any) -> list[Keybind]:
    return [_keybind(key, item) for item in _list(key, value)]


def _window_rules(key: str, value: Any) -> list[WindowHook]:
    return [WindowHook.from_mapping(item) for item in _list(key, value)]


def _raw(key: str, value: Any) -> Any:
    return value


def _optional(parser: Callable[[str, Any], Any]) -> Callable[[str, Any], Any]:
    def parse(key: str, value: Any) -> Any:
        return None if value is None else parser(key, value)

    return parse


@dataclass
class WindowHook:
    """A rule that places, floats or retypes windows matched by class or title."""

    window_class: re.Pattern[str] | None = None
    window_title: re.Pattern[str] | None = None
    spawn_on_tag: int | None = None
    spawn_on_workspace: int | None = None
    spawn_floating: bool | None = None
    spawn_sticky: bool | None = None
    spawn_fullscreen: bool | None = None
    spawn_as_type: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> WindowHook:
        """Build a rule from parsed file data; an invalid pattern matches nothing."""
        if not isinstance(data, Mapping):
            raise ValueError(f"window rule: expected a table, got {data!r}")
        opt_index = _optional(_index)
        opt_bool = _optional(_bool)
        return cls(
            window_class=_compile("window_class", data.get("window_class")),
            window_title=_compile("window_title", data.get("window_title")),
            spawn_on_tag=opt_index("spawn_on_tag", data.get("spawn_on_tag")),
            spawn_on_workspace=opt_index(
                "spawn_on_workspace", data.get("spawn_on_workspace")
            ),
            spawn_floating=opt_bool("spawn_floating", data.get("spawn_floating")),
            spawn_sticky=opt_bool("spawn_sticky", data.get("spawn_sticky")),
            spawn_fullscreen=opt_bool("spawn_fullscreen", data.get("spawn_fullscreen")),
            spawn_as_type=_optional(_str)("spawn_as_type", data.get("spawn_as_type")),
        )

    def score_window(self, window: WindowInfo) -> int:
        """How well the rule fits: a title match counts twice a class match; 0 is none."""
        class_score = 0
        if self.window_class is not None:
            class_score = int(
                _matches_any(self.window_class, (window.res_class, window.res_name))
            )
        title_score = 0
        if self.window_title is not None:
            title_score = int(
                _matches_any(self.window_title, (window.legacy_name, window.name))
            )
        return class_score + 2 * title_score


@dataclass
class Config:
    """The window manager's configuration; every missing option takes its default."""

    modkey: str = "Mod4"
    mousekey: Modifier | None = field(default_factory=lambda: Modifier("Mod4"))
    workspaces: list[dict[str, Any]] | None = field(default_factory=list)
    tags: list[str] | None = field(default_factory=lambda: list(DEFAULT_TAGS))
    max_window_width: Any = None
    layouts: list[str] = field(default_factory=list)
    layout_definitions: list[Any] = field(default_factory=list)
    layout_mode: str = "Tag"
    insert_behavior: str = "Bottom"
    scratchpad: list[dict[str, Any]] | None = field(
        default_factory=_default_scratchpads
    )
    window_rules: list[WindowHook] | None = field(default_factory=list)
    disable_current_tag_swap: bool = False
    disable_tile_drag: bool = False
    disable_window_snap: bool = True
    focus_behaviour: str = "Sloppy"
    focus_new_windows: bool = True
    single_window_border: bool = True
    sloppy_mouse_follows_focus: bool = True
    create_follows_cursor: bool | None = None
    auto_derive_workspaces: bool = True
    disable_cursor_reposition_on_resize: bool = False
    keybind: list[Keybind] = field(default_factory=_default_keybinds)
    state_path: Path | None = None
    theme_setting: ThemeConfig = field(default_factory=ThemeConfig)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Config:
        """Build a configuration from parsed file data; unknown keys are ignored."""
        if not isinstance(data, Mapping):
            raise ValueError(f"config: expected a table, got {data!r}")
        config = cls()
        for key, value in data.items():
            parser = _FIELD_PARSERS.get(key)
            if parser is not None:
                setattr(config, key, parser(key, value))
        return config

    def tag_labels(self) -> list[str]:
        """The configured tag names, or the default ones."""
        return list(self.tags) if self.tags is not None else list(DEFAULT_TAGS)

    def state_file(self) -> Path:
        """Where state is dumped on a soft reload."""
        return self.state_path if self.state_path is not None else STATE_FILE

    def create_follows_cursor_enabled(self) -> bool:
        """Whether new windows open under the cursor; defaults to sloppy focus only."""
        if self.create_follows_cursor is not None:
            return self.create_follows_cursor
        return self.focus_behaviour == "Sloppy"

    def best_window_rule(self, window: WindowInfo) -> WindowHook | None:
        """The highest scoring matching rule; the last one wins a tie."""
        best: WindowHook | None = None
        best_score = 0
        for hook in self.window_rules or ():
            score = hook.score_window(window)
            if score and score >= best_score:
                best, best_score = hook, score
        return best


_FIELD_PARSERS: dict[str, Callable[[str, Any], Any]] = {
    "modkey": _str,
    "mousekey": _optional(_modifier),
    "workspaces": _optional(_mapping_list),
    "tags": _optional(_str_list),
    "max_window_width": _raw,
    "layouts": _str_list,
    "layout_definitions": _list,
    "layout_mode": _str,
    "insert_behavior": _str,
    "scratchpad": _optional(_scratchpads),
    "window_rules": _optional(_window_rules),
    "disable_current_tag_swap": _bool,
    "disable_tile_drag": _bool,
    "disable_window_snap": _bool,
    "focus_behaviour": _str,
    "focus_new_windows": _bool,
    "single_window_border": _bool,
    "sloppy_mouse_follows_focus": _bool,
    "create_follows_cursor": _optional(_bool),
    "auto_derive_workspaces": _bool,
    "disable_cursor_reposition_on_resize": _bool,
    "keybind": _keybinds,
    "state_path": _optional(_path),
}


def parse_config_text(text: str, suffix: str) -> Config:
    """Parse configuration text: RON for a ``.ron`` suffix, TOML otherwise."""
    data = ron.loads(text) if suffix == ".ron" else tomllib.loads(text)
    return Config.from_mapping(data)