"""Fixed key map.

Keys use Textual's canonical names ("down", "ctrl+c").
"""

from __future__ import annotations

from enum import Enum


class Action(Enum):
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    TOGGLE_HEADER = "toggle_header"
    QUIT = "quit"
    UNHANDLED = "unhandled"


ROW_DOWN_KEYS = ("j", "down", "s")
ROW_UP_KEYS = ("k", "up", "w")
QUIT_KEYS = ("q", "ctrl+c")
TOGGLE_HEADER_KEYS = ("h",)

KEYMAP: dict[str, Action] = {
    **{key: Action.MOVE_DOWN for key in ROW_DOWN_KEYS},
    **{key: Action.MOVE_UP for key in ROW_UP_KEYS},
    **{key: Action.QUIT for key in QUIT_KEYS},
    **{key: Action.TOGGLE_HEADER for key in TOGGLE_HEADER_KEYS},
}


def resolve(key: str) -> Action:
    """Map a key name to its action."""
    return KEYMAP.get(key, Action.UNHANDLED)
