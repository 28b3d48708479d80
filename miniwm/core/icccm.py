# core/icccm.py
"""
ICCCM helpers: atom cache and WM_PROTOCOLS client messages.

Clients advertise WM_DELETE_WINDOW / WM_TAKE_FOCUS in their WM_PROTOCOLS
property; the manager talks to them with a ClientMessage of type
WM_PROTOCOLS, format 32, data[0] = protocol atom, data[1] = timestamp.
"""

import logging
from typing import Any, Dict, List

from Xlib import X
from Xlib.protocol import event
from Xlib.error import XError

logger = logging.getLogger("miniwm.icccm")
logger.addHandler(logging.NullHandler())

ATOM_NAMES = ("WM_PROTOCOLS", "WM_DELETE_WINDOW", "WM_TAKE_FOCUS")


class ICCCM:
    def __init__(self, dpy: Any):
        self.dpy = dpy
        self.atoms: Dict[str, int] = {}
        for name in ATOM_NAMES:
            self.atom(name)

    def atom(self, name: str) -> int:
        """Intern an atom and cache it."""
        if name not in self.atoms:
            self.atoms[name] = self.dpy.intern_atom(name)
        return self.atoms[name]

    def protocols(self, window: Any) -> List[int]:
        try:
            return list(window.get_wm_protocols() or [])
        except XError:
            logger.debug("WM_PROTOCOLS unreadable for %s", getattr(window, "id", window))
            return []

    def supports(self, window: Any, name: str) -> bool:
        return self.atom(name) in self.protocols(window)

    def send_protocol(self, window: Any, name: str, timestamp: int = X.CurrentTime):
        data = (32, [self.atom(name), timestamp, 0, 0, 0])
        ev = event.ClientMessage(
            window=window, client_type=self.atom("WM_PROTOCOLS"), data=data)
        window.send_event(ev, event_mask=X.NoEventMask)
        logger.debug("sent %s to %s", name, getattr(window, "id", window))
