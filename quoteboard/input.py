"""Input events and the mode state machine"""
import logging
from dataclasses import dataclass

from .errors import StorageError
from .state import Normal, AddingCode

log = logging.getLogger(__name__)

# Named keys. Anything else is a single character.
KEY_UP = "UP"
KEY_DOWN = "DOWN"
KEY_ENTER = "ENTER"
KEY_ESC = "ESC"
KEY_BACKSPACE = "BACKSPACE"
KEY_CTRL_C = "CTRL_C"

MOUSE_PRESS = "press"
MOUSE_RELEASE = "release"


@dataclass(frozen=True)
class KeyEvent:
    key: str


@dataclass(frozen=True)
class MouseEvent:
    kind: str
    row: int
    col: int = 0


def _is_char(key):
    return len(key) == 1


def handle_normal(state, event):
    """Normal mode: commands, cursor movement, pointer selection."""
    if isinstance(event, MouseEvent):
        if event.kind == MOUSE_RELEASE:
            state.select_by_position(event.row)
        return
    if not isinstance(event, KeyEvent):
        return

    key = event.key
    cmd = key.lower() if _is_char(key) else key

    if cmd == "q":
        state.should_exit = True
    elif cmd == "r":
        state.refresh()
    elif cmd == "n":
        state.mode = AddingCode()
    elif cmd == "d":
        state.delete_selected()
    elif cmd == "u":
        state.move_selected_up()
    elif cmd == "j":
        state.move_selected_down()
    elif cmd == KEY_UP:
        state.move_selection_up()
    elif cmd == KEY_DOWN:
        state.move_selection_down()


def handle_adding(state, event):
    """AddingCode mode: edit the buffer, confirm or cancel."""
    if not isinstance(event, KeyEvent):
        return

    key = event.key
    buffer = state.mode.buffer

    if key == KEY_ENTER:
        state.mode = Normal()
        if buffer:
            state.add_stock(buffer)
            state.status_message = f"Added {buffer}"
    elif key == KEY_ESC:
        state.mode = Normal()
    elif key == KEY_BACKSPACE:
        state.mode = AddingCode(buffer[:-1])
    elif _is_char(key) and key.isprintable():
        state.mode = AddingCode(buffer + key)


def handle_event(state, event):
    """Apply one input event to ``state``. Unknown input is ignored."""
    if isinstance(event, KeyEvent) and event.key == KEY_CTRL_C:
        state.should_exit = True
        return
    if isinstance(event, KeyEvent):
        # a message lives until the next key press
        state.status_message = ""

    try:
        if isinstance(state.mode, AddingCode):
            handle_adding(state, event)
        else:
            handle_normal(state, event)
    except StorageError as e:
        # in-memory change stands; only the save failed
        log.error("%s", e)
        state.status_message = str(e)
