# core/keybindings.py

"""
Key bindings: grabs key combinations on the root window and dispatches
KeyPress events to actions.

A binding is (keycode, modifier mask) -> callable. Lock and NumLock are
ignored when matching, so each combination is grabbed once per lock state.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from Xlib import X, XK

logger = logging.getLogger("miniwm.keybindings")
logger.addHandler(logging.NullHandler())

KeyAction = Callable[[], None]

# Mod2 is NumLock on practically every keymap
LOCK_MASKS = (0, X.LockMask, X.Mod2Mask, X.LockMask | X.Mod2Mask)
RELEVANT_MASK = X.Mod1Mask | X.Mod4Mask | X.ControlMask | X.ShiftMask


def parse_modifiers(modifiers: Optional[List[str]], default_mask: int = 0) -> int:
    """
    Convert modifier names to an X modifier mask. "mod" stands for the
    configured primary modifier.
    Examples: "Mod4", "super", "Mod1", "alt", "Control", "Shift"
    """
    mask = 0
    for m in modifiers or []:
        m = m.lower()
        if m == "mod":
            mask |= default_mask
        elif m in ("mod4", "super"):
            mask |= X.Mod4Mask
        elif m in ("mod1", "alt"):
            mask |= X.Mod1Mask
        elif m in ("control", "ctrl"):
            mask |= X.ControlMask
        elif m == "shift":
            mask |= X.ShiftMask
        else:
            logger.warning("unknown modifier in keybindings: %s", m)
    return mask


class KeyBindings:
    def __init__(self, dpy: Any, root: Any, modifier: str = "Mod4"):
        self.dpy = dpy
        self.root = root
        self.default_mod = parse_modifiers([modifier]) or X.Mod4Mask
        self._bindings: Dict[Tuple[int, int], KeyAction] = {}

    def _keysym_to_keycode(self, keysym_str: str) -> Optional[int]:
        sym = XK.string_to_keysym(keysym_str)
        if sym == X.NoSymbol:
            logger.warning("unknown keysym: %s", keysym_str)
            return None
        keycode = self.dpy.keysym_to_keycode(sym)
        if not keycode:
            logger.warning("keysym %s is not on the keyboard", keysym_str)
            return None
        return keycode

    def add_binding(self, keysym: str, modifiers: List[str], action: KeyAction) -> bool:
        keycode = self._keysym_to_keycode(keysym)
        if keycode is None:
            return False
        mask = parse_modifiers(modifiers, self.default_mod) or self.default_mod
        self._bindings[(keycode, mask)] = action
        return True

    def grab_keys(self):
        """Grab every bound combination on the root window."""
        for keycode, mask in self._bindings:
            for lock in LOCK_MASKS:
                self.root.grab_key(keycode, mask | lock, True, X.GrabModeAsync, X.GrabModeAsync)
        self.dpy.flush()

    def ungrab_all_keys(self):
        for keycode, mask in self._bindings:
            for lock in LOCK_MASKS:
                self.root.ungrab_key(keycode, mask | lock)
        self.dpy.flush()

    def handle_key_press(self, ev: Any) -> bool:
        """Run the action bound to the pressed combination, if any."""
        state = ev.state & RELEVANT_MASK
        action = self._bindings.get((ev.detail, state))
        if action is None:
            logger.debug("KeyPress without binding: keycode %s state %s", ev.detail, state)
            return False
        logger.debug("KeyPress: keycode %s state %s -> %s", ev.detail, state, action)
        action()
        return True

    def __len__(self):
        return len(self._bindings)
