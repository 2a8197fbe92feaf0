"""The commands a keybind may trigger, with their documentation."""

from __future__ import annotations

from enum import Enum


class BaseCommand(Enum):
    """Commands that can be bound to keys or sent to the window manager."""

    Execute = "Execute"
    CloseWindow = "CloseWindow"
    CloseAllOtherWindows = "CloseAllOtherWindows"
    SwapTags = "SwapTags"
    SoftReload = "SoftReload"
    HardReload = "HardReload"
    AttachScratchPad = "AttachScratchPad"
    ReleaseScratchPad = "ReleaseScratchPad"
    NextScratchPadWindow = "NextScratchPadWindow"
    PrevScratchPadWindow = "PrevScratchPadWindow"
    ToggleScratchPad = "ToggleScratchPad"
    ToggleFullScreen = "ToggleFullScreen"
    ToggleMaximized = "ToggleMaximized"
    ToggleSticky = "ToggleSticky"
    ToggleAbove = "ToggleAbove"
    GotoTag = "GotoTag"
    ReturnToLastTag = "ReturnToLastTag"
    FloatingToTile = "FloatingToTile"
    TileToFloating = "TileToFloating"
    ToggleFloating = "ToggleFloating"
    MoveWindowUp = "MoveWindowUp"
    MoveWindowDown = "MoveWindowDown"
    MoveWindowTop = "MoveWindowTop"
    SwapWindowTop = "SwapWindowTop"
    FocusNextTag = "FocusNextTag"
    FocusPreviousTag = "FocusPreviousTag"
    FocusWindow = "FocusWindow"
    FocusWindowUp = "FocusWindowUp"
    FocusWindowDown = "FocusWindowDown"
    FocusWindowTop = "FocusWindowTop"
    FocusWorkspaceNext = "FocusWorkspaceNext"
    FocusWorkspacePrevious = "FocusWorkspacePrevious"
    MoveToTag = "MoveToTag"
    MoveWindowToNextTag = "MoveWindowToNextTag"
    MoveWindowToPreviousTag = "MoveWindowToPreviousTag"
    MoveToLastWorkspace = "MoveToLastWorkspace"
    MoveWindowToNextWorkspace = "MoveWindowToNextWorkspace"
    MoveWindowToPreviousWorkspace = "MoveWindowToPreviousWorkspace"
    NextLayout = "NextLayout"
    PreviousLayout = "PreviousLayout"
    SetLayout = "SetLayout"
    RotateTag = "RotateTag"
    IncreaseMainWidth = "IncreaseMainWidth"
    DecreaseMainWidth = "DecreaseMainWidth"
    IncreaseMainSize = "IncreaseMainSize"
    DecreaseMainSize = "DecreaseMainSize"
    IncreaseMainCount = "IncreaseMainCount"
    DecreaseMainCount = "DecreaseMainCount"
    SetMarginMultiplier = "SetMarginMultiplier"
    UnloadTheme = "UnloadTheme"
    LoadTheme = "LoadTheme"

    @classmethod
    def documentation(cls) -> str:
        """Every command name on its own line, each followed by its indented notes."""
        parts = []
        for member in cls:
            parts.append(f"\n{member.name}")
            parts.extend(f"\n    {line}" for line in _DOCS.get(member.name, ()))
        return "".join(parts)

    def command_name(self) -> str:
        """The name under which the command is sent; Execute has none."""
        return _WIRE_NAMES.get(self.name, self.name)


_DEPRECATED = "Note: This is deprecated and will be dropped in a future release."

_DOCS: dict[str, tuple[str, ...]] = {
    "AttachScratchPad": ("Args: `ScratchpadName`",),
    "ReleaseScratchPad": ("Args: `tag_index` or `ScratchpadName`",),
    "NextScratchPadWindow": ("Args: `ScratchpadName`",),
    "PrevScratchPadWindow": ("Args: `ScratchpadName`",),
    "ToggleScratchPad": ("Args: `ScratchpadName`",),
    "FocusNextTag": ("Args: `behavior` (string, optional)",),
    "FocusPreviousTag": ("Args: `behavior` (string, optional)",),
    "FocusWindow": ("Args: `WindowClass` or `visible-window-index` (int)",),
    "MoveToTag": (
        "Args: `tag_index` (int)",
        "Note: Please use `SendWindowToTag` instead.",
    ),
    "SetLayout": ("Args: `LayoutName`",),
    "IncreaseMainWidth": (_DEPRECATED,),
    "DecreaseMainWidth": (_DEPRECATED,),
    "SetMarginMultiplier": ("Args: `multiplier-value` (float)",),
    "LoadTheme": (
        "Args: `Path_to/theme.ron`",
        "Note: `theme.toml` will be deprecated but stays for backwards "
        "compatibility for a while",
    ),
}

_WIRE_NAMES: dict[str, str] = {
    "SwapTags": "SwapScreens",
    "GotoTag": "GoToTag",
    "MoveToTag": "SendWindowToTag",
    "MoveToLastWorkspace": "MoveWindowToLastWorkspace",
    "Execute": "",
}