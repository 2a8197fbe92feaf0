"""Translation of modifier names into X11 modifier masks."""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntFlag


class ModMask(IntFlag):
    """X11 modifier mask bits."""

    NONE = 0
    SHIFT = 1 << 0
    LOCK = 1 << 1
    CONTROL = 1 << 2
    MOD1 = 1 << 3
    MOD2 = 1 << 4
    MOD3 = 1 << 5
    MOD4 = 1 << 6
    MOD5 = 1 << 7
    ANY = 1 << 15


_NAMES = {
    "None": ModMask.ANY,
    "Shift": ModMask.SHIFT,
    "Control": ModMask.CONTROL,
    "Mod1": ModMask.MOD1,
    "Alt": ModMask.MOD1,
    # Mod2 (NumLock) is deliberately ignored.
    "Mod3": ModMask.MOD3,
    "Mod4": ModMask.MOD4,
    "Super": ModMask.MOD4,
    "Mod5": ModMask.MOD5,
}

_ALLOWED = (
    ModMask.SHIFT
    | ModMask.CONTROL
    | ModMask.MOD1
    | ModMask.MOD3
    | ModMask.MOD4
    | ModMask.MOD5
)


def into_mod(key: str) -> ModMask:
    """Return the mask for a single modifier name; unknown names give an empty mask."""
    return _NAMES.get(key, ModMask.NONE)


def into_modmask(keys: Iterable[str]) -> ModMask:
    """Combine modifier names into one mask, dropping NumLock, CapsLock and AnyModifier."""
    mask = ModMask.NONE
    for key in keys:
        mask |= into_mod(key)
    mask &= ~(ModMask.MOD2 | ModMask.LOCK)
    return mask & _ALLOWED