from types import SimpleNamespace

import pytest

from ui.input import Key_Event, Modifiers, ModifierTracker, get_mods, handle_key_event, reset_mods
from ui.keys import NEEDS_SELECTION, Action, action_for, resolve

CTRL = Modifiers(ctrl=True)


@pytest.fixture(autouse=True)
def clean_mods():
    reset_mods()
    yield
    reset_mods()


@pytest.mark.parametrize(
    ("keysym", "mods", "action"),
    [
        ("c", CTRL, Action.copy),
        ("X", CTRL, Action.cut),
        ("v", CTRL, Action.paste),
        ("d", CTRL, Action.duplicate),
        ("a", CTRL, Action.select_all),
        ("z", CTRL, Action.undo),
        ("Z", Modifiers(ctrl=True, shift=True), Action.redo),
        ("y", CTRL, Action.redo),
        ("Delete", Modifiers(), Action.delete),
        ("BackSpace", Modifiers(), Action.delete),
        ("Escape", Modifiers(), Action.clear_selection),
        ("Up", Modifiers(), Action.nav_up),
        ("Down", Modifiers(shift=True), Action.extend_down),
        ("Up", Modifiers(alt=True), Action.move_up),
        ("Down", Modifiers(alt=True), Action.move_down),
        ("c", Modifiers(), None),
        ("q", CTRL, None),
    ],
)
def test_action_for(keysym, mods, action):
    assert action_for(keysym, mods) is action


def test_resolve_reads_state_masks():
    assert resolve(Key_Event("Down", state=0x0001)) is Action.extend_down
    assert resolve(Key_Event("c", state=0x0004)) is Action.copy
    assert resolve(Key_Event("Up", state=0x0008)) is Action.move_up
    assert resolve(Key_Event("Up", state=0x20000)) is Action.move_up
    assert resolve(Key_Event("Up")) is Action.nav_up


def test_explicit_mods_win_over_state():
    assert resolve(Key_Event("c", state=0x0004, mods=Modifiers())) is None


def test_held_modifiers_are_tracked():
    handle_key_event(SimpleNamespace(keysym="Control_L", type="KeyPress", widget=None))
    assert get_mods(None).ctrl
    assert resolve(Key_Event("v")) is Action.paste
    handle_key_event(SimpleNamespace(keysym="Control_L", type="KeyRelease", widget=None))
    assert not get_mods(0).ctrl


def test_command_counts_as_ctrl_only_on_aqua():
    tracker = ModifierTracker()
    tracker.press("Meta_L")
    assert not tracker.snapshot().ctrl
    tracker.windowing = "aqua"
    assert tracker.snapshot().ctrl
    tracker.release("Meta_L")
    assert not tracker.snapshot().ctrl


def test_get_mods_rejects_unknown_input():
    assert get_mods(0x0001 | 0x0004) == Modifiers(shift=True, ctrl=True)
    with pytest.raises(TypeError):
        get_mods("ctrl")


def test_selection_gated_actions():
    assert Action.paste not in NEEDS_SELECTION
    assert Action.select_all not in NEEDS_SELECTION
    assert {Action.copy, Action.cut, Action.duplicate, Action.delete} <= NEEDS_SELECTION


@pytest.mark.parametrize(("keysym", "action"), [("c", Action.copy), ("v", Action.paste), ("z", Action.undo), ("d", Action.duplicate)])
def test_command_chords_on_aqua(keysym, action):
    tracker = ModifierTracker()
    tracker.windowing = "aqua"
    tracker.press("Meta_L")
    mods = tracker.snapshot(0x0008)
    assert mods == Modifiers(ctrl=True)
    assert action_for(keysym, mods) is action


def test_option_is_alt_on_aqua():
    tracker = ModifierTracker()
    tracker.windowing = "aqua"
    mods = tracker.snapshot(0x0010)
    assert mods == Modifiers(alt=True)
    assert action_for("Up", mods) is Action.move_up
    assert ModifierTracker().snapshot(0x0008) == Modifiers(alt=True)
