"""Keyboard shortcuts for the document surface."""

from __future__ import annotations

import tkinter as tk
from enum import StrEnum
from typing import Final

from ui.input import Key_Event, Modifiers, key_event


class Action(StrEnum):
    copy = "copy"
    cut = "cut"
    paste = "paste"
    duplicate = "duplicate"
    delete = "delete"
    clear_selection = "clear_selection"
    select_all = "select_all"
    nav_up = "nav_up"
    nav_down = "nav_down"
    extend_up = "extend_up"
    extend_down = "extend_down"
    move_up = "move_up"
    move_down = "move_down"
    undo = "undo"
    redo = "redo"


# (keysym lowercased, ctrl, shift, alt) -> action
_BINDINGS: Final[dict[tuple[str, bool, bool, bool], Action]] = {
    ("c", True, False, False): Action.copy,
    ("x", True, False, False): Action.cut,
    ("v", True, False, False): Action.paste,
    ("d", True, False, False): Action.duplicate,
    ("a", True, False, False): Action.select_all,
    ("z", True, False, False): Action.undo,
    ("z", True, True, False): Action.redo,
    ("y", True, False, False): Action.redo,
    ("delete", False, False, False): Action.delete,
    ("backspace", False, False, False): Action.delete,
    ("escape", False, False, False): Action.clear_selection,
    ("up", False, False, False): Action.nav_up,
    ("down", False, False, False): Action.nav_down,
    ("up", False, True, False): Action.extend_up,
    ("down", False, True, False): Action.extend_down,
    ("up", False, False, True): Action.move_up,
    ("down", False, False, True): Action.move_down,
}

# actions that only make sense with something selected
NEEDS_SELECTION: Final[frozenset[Action]] = frozenset(
    {Action.copy, Action.cut, Action.duplicate, Action.delete, Action.move_up, Action.move_down}
)


def action_for(keysym: str, mods: Modifiers) -> Action | None:
    return _BINDINGS.get((keysym.lower(), mods.ctrl, mods.shift, mods.alt))


def resolve(evt: tk.Event | Key_Event) -> Action | None:
    """Map a key press to an Action, or None when it is not a shortcut."""
    ke = key_event(evt)
    assert ke.mods is not None
    return action_for(ke.keysym, ke.mods)
