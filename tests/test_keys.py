"""Tests for keys.py - fixed key map."""

import sys
from pathlib import Path

import pytest

# Add scripts to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from tasktui.keys import KEYMAP, Action, resolve


class TestResolve:
    """Tests for resolve."""

    @pytest.mark.parametrize(
        ("key", "action"),
        [
            ("j", Action.MOVE_DOWN),
            ("down", Action.MOVE_DOWN),
            ("s", Action.MOVE_DOWN),
            ("k", Action.MOVE_UP),
            ("up", Action.MOVE_UP),
            ("w", Action.MOVE_UP),
            ("q", Action.QUIT),
            ("ctrl+c", Action.QUIT),
            ("h", Action.TOGGLE_HEADER),
        ],
    )
    def test_bound_keys(self, key: str, action: Action) -> None:
        assert resolve(key) is action

    @pytest.mark.parametrize("key", ["x", "enter", "J", "", "escape"])
    def test_unbound_keys(self, key: str) -> None:
        assert resolve(key) is Action.UNHANDLED

    def test_keymap_never_maps_to_unhandled(self) -> None:
        assert Action.UNHANDLED not in KEYMAP.values()
