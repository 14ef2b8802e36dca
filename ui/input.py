from __future__ import annotations

import tkinter as tk
from dataclasses import dataclass

_SHIFT_KEYS = frozenset({"Shift_L", "Shift_R"})
_CTRL_KEYS = frozenset({"Control_L", "Control_R"})
_ALT_KEYS = frozenset({"Alt_L", "Alt_R", "Alt", "ISO_Level3_Shift", "Option_L", "Option_R"})
_META_KEYS = frozenset({"Meta_L", "Meta_R", "Super_L", "Super_R", "Command"})

_SHIFT_MASK = 0x0001
_CTRL_MASK = 0x0004
_ALT_MASK = 0x0008
_ALT_MASK_WIN32 = 0x20000
_CMD_MASK_AQUA = 0x0008
_OPTION_MASK_AQUA = 0x0010


@dataclass(frozen=True, slots=True)
class Modifiers:
    shift: bool = False
    ctrl: bool = False
    alt: bool = False


@dataclass(frozen=True, slots=True)
class Key_Event:
    """Toolkit-neutral key press."""

    keysym: str
    state: int = 0
    mods: Modifiers | None = None


class ModifierTracker:
    """Remembers held modifier keys; event state masks are unreliable on some platforms."""

    def __init__(self) -> None:
        self.held: set[str] = set()
        self.windowing: str | None = None

    def press(self, keysym: str) -> None:
        if group := _group(keysym):
            self.held.add(group)

    def release(self, keysym: str) -> None:
        if group := _group(keysym):
            self.held.discard(group)

    def snapshot(self, state: int = 0) -> Modifiers:
        ctrl = bool(state & _CTRL_MASK) or "ctrl" in self.held
        if self.windowing == "aqua":
            # Command arrives as Mod1 and stands in for Control; Option is Mod2
            ctrl = ctrl or bool(state & _CMD_MASK_AQUA) or "meta" in self.held
            alt_bits = _OPTION_MASK_AQUA
        else:
            alt_bits = _ALT_MASK | _ALT_MASK_WIN32
        return Modifiers(
            shift=bool(state & _SHIFT_MASK) or "shift" in self.held,
            ctrl=ctrl,
            alt=bool(state & alt_bits) or "alt" in self.held,
        )

    def reset(self) -> None:
        self.held.clear()


def _group(keysym: str) -> str | None:
    if keysym in _SHIFT_KEYS:
        return "shift"
    if keysym in _CTRL_KEYS:
        return "ctrl"
    if keysym in _ALT_KEYS:
        return "alt"
    if keysym in _META_KEYS:
        return "meta"
    return None


_mods = ModifierTracker()


def handle_key_event(evt: tk.Event) -> None:
    """Bind to <KeyPress> and <KeyRelease> so held modifiers are tracked."""
    if _mods.windowing is None and getattr(evt, "widget", None) is not None:
        try:
            _mods.windowing = evt.widget.tk.call("tk", "windowingsystem")
        except tk.TclError:
            _mods.windowing = None
    keysym = getattr(evt, "keysym", "")
    if str(getattr(evt, "type", "")) in {"KeyRelease", "3"}:
        _mods.release(keysym)
    else:
        _mods.press(keysym)


def reset_mods() -> None:
    _mods.reset()


def get_mods(evt: tk.Event | Key_Event | int | None) -> Modifiers:
    if isinstance(evt, Key_Event):
        return evt.mods if evt.mods is not None else _mods.snapshot(evt.state)
    if isinstance(evt, tk.Event):
        return _mods.snapshot(int(getattr(evt, "state", 0) or 0))
    if isinstance(evt, int):
        return _mods.snapshot(evt)
    if evt is None:
        return _mods.snapshot(0)
    raise TypeError(f"Unsupported event type: {type(evt)}")


def key_event(evt: tk.Event | Key_Event) -> Key_Event:
    """Normalise a tk event into a Key_Event with resolved modifiers."""
    if isinstance(evt, Key_Event):
        return evt if evt.mods is not None else Key_Event(evt.keysym, evt.state, get_mods(evt))
    return Key_Event(getattr(evt, "keysym", ""), int(getattr(evt, "state", 0) or 0), get_mods(evt))
