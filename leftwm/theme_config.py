"""Theme settings: borders, margins, gutters and colours."""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any

from leftwm import ron

logger = logging.getLogger(__name__)

_U32_MAX = 2**32 - 1

CustomMargins = int | tuple[int, ...]


class Side(Enum):
    """The edge of a screen a gutter sits on."""

    Top = "Top"
    Right = "Right"
    Bottom = "Bottom"
    Left = "Left"


@dataclass(frozen=True)
class Gutter:
    """Space reserved along one side of a workspace."""

    side: Side
    value: int
    id: int | None = None


@dataclass(frozen=True)
class Margins:
    """Margins in the order top, right, bottom, left."""

    top: int
    right: int
    bottom: int
    left: int

    @classmethod
    def uniform(cls, size: int) -> Margins:
        return cls(size, size, size, size)

    @classmethod
    def from_pair(cls, vertical: int, horizontal: int) -> Margins:
        return cls(vertical, horizontal, vertical, horizontal)

    @classmethod
    def from_triple(cls, top: int, horizontal: int, bottom: int) -> Margins:
        return cls(top, horizontal, bottom, horizontal)


def margins_from_custom(value: int | Sequence[int]) -> Margins:
    """Turn a single size or a one-to-four item list (as in CSS) into margins."""
    if isinstance(value, int):
        return Margins.uniform(value)
    sizes = list(value)
    if not sizes:
        raise ValueError("Empty margin or border array")
    if len(sizes) == 1:
        return Margins.uniform(sizes[0])
    if len(sizes) == 2:
        return Margins.from_pair(*sizes)
    if len(sizes) == 3:
        return Margins.from_triple(*sizes)
    if len(sizes) == 4:
        return Margins(*sizes)
    raise ValueError("Too many entries in margin or border array")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_u32(value: Any) -> bool:
    return _is_int(value) and 0 <= value <= _U32_MAX


def _optional_int(data: Mapping[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if not _is_int(value):
        raise ValueError(f"{key}: expected an integer, got {value!r}")
    return value


def _optional_bool(data: Mapping[str, Any], key: str) -> bool | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ValueError(f"{key}: expected a boolean, got {value!r}")
    return value


def _optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{key}: expected a string, got {value!r}")
    return value


def _optional_margin(data: Mapping[str, Any], key: str) -> CustomMargins | None:
    value = data.get(key)
    if value is None:
        return None
    if _is_u32(value):
        return value
    if isinstance(value, (list, tuple)) and all(_is_u32(item) for item in value):
        return tuple(value)
    raise ValueError(f"{key}: expected a size or a list of sizes, got {value!r}")


def _gutter_from_mapping(data: Any) -> Gutter:
    if not isinstance(data, Mapping):
        raise ValueError(f"gutter: expected a table, got {data!r}")
    side_name = data.get("side")
    try:
        side = Side(side_name)
    except ValueError as err:
        raise ValueError(f"gutter: unknown side {side_name!r}") from err
    value = data.get("value")
    if not _is_int(value):
        raise ValueError(f"gutter: expected an integer value, got {value!r}")
    gutter_id = data.get("id")
    if gutter_id is not None and not (_is_int(gutter_id) and gutter_id >= 0):
        raise ValueError(f"gutter: invalid id {gutter_id!r}")
    return Gutter(side=side, value=value, id=gutter_id)


@dataclass
class ThemeConfig:
    """Settings a theme provides; a field left as None falls back to the config's default."""

    border_width: int | None = 1
    margin: CustomMargins | None = 10
    workspace_margin: CustomMargins | None = 10
    default_width: int | None = 1000
    default_height: int | None = 700
    always_float: bool | None = False
    gutter: list[Gutter] | None = None
    default_border_color: str | None = "#000000"
    floating_border_color: str | None = "#000000"
    focused_border_color: str | None = "#FF0000"
    background_color: str | None = "#333333"
    on_new_window_cmd: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ThemeConfig:
        """Build a theme from parsed file data; missing keys become None."""
        if not isinstance(data, Mapping):
            raise ValueError(f"theme: expected a table, got {data!r}")
        gutter_data = data.get("gutter")
        if gutter_data is None:
            gutter = None
        elif isinstance(gutter_data, (list, tuple)):
            gutter = [_gutter_from_mapping(item) for item in gutter_data]
        else:
            raise ValueError(f"gutter: expected a list, got {gutter_data!r}")
        return cls(
            border_width=_optional_int(data, "border_width"),
            margin=_optional_margin(data, "margin"),
            workspace_margin=_optional_margin(data, "workspace_margin"),
            default_width=_optional_int(data, "default_width"),
            default_height=_optional_int(data, "default_height"),
            always_float=_optional_bool(data, "always_float"),
            gutter=gutter,
            default_border_color=_optional_str(data, "default_border_color"),
            floating_border_color=_optional_str(data, "floating_border_color"),
            focused_border_color=_optional_str(data, "focused_border_color"),
            background_color=_optional_str(data, "background_color"),
            on_new_window_cmd=_optional_str(data, "on_new_window"),
        )

    def load(self, path: str | os.PathLike[str]) -> bool:
        """Replace these settings with the theme file at ``path``; keep them if it fails."""
        try:
            theme = load_theme_file(path)
        except (OSError, ValueError) as err:
            logger.error("Could not load theme at path %s: %s", Path(path), err)
            return False
        for field in fields(self):
            setattr(self, field.name, getattr(theme, field.name))
        return True


def load_theme_file(path: str | os.PathLike[str]) -> ThemeConfig:
    """Read a theme file: RON for a ``.ron`` suffix, TOML otherwise."""
    path = Path(path)
    contents = path.read_text(encoding="utf-8")
    if path.suffix == ".ron":
        data = ron.loads(contents)
    else:
        data = tomllib.loads(contents)
    return ThemeConfig.from_mapping(data)