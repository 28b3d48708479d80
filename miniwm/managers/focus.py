# managers/focus.py
"""
Focus manager.

Tracks the single focused client of the session, paints the border focus
indicator, cycles focus within the visible workspace and closes the focused
window (politely via WM_DELETE_WINDOW when the client supports it).

With nothing focused, focus_next() picks the first client of the workspace
and focus_prev() the last one.
"""

from typing import List, Optional
import logging

from Xlib import X

from miniwm.core.icccm import ICCCM
from miniwm.core.state import Session
from miniwm.managers.registry import ManagedClient

logger = logging.getLogger("miniwm.focus")
logger.addHandler(logging.NullHandler())


class FocusManager:
    def __init__(self, session: Session, icccm: ICCCM, active_pixel: int, inactive_pixel: int):
        self.session = session
        self.icccm = icccm
        self.active_pixel = active_pixel
        self.inactive_pixel = inactive_pixel

    @property
    def focused(self) -> Optional[ManagedClient]:
        return self.session.focused

    # ---------------------------
    # Focus
    # ---------------------------
    def set_focus(self, client: Optional[ManagedClient]):
        s = self.session
        if client is None:
            s.focused = None
            s.root.set_input_focus(X.RevertToPointerRoot, X.CurrentTime)
            s.dpy.flush()
            logger.debug("focus: root")
            return

        for other in list(s.registry.clients_in(client.workspace)):
            other.window.change_attributes(border_pixel=self.inactive_pixel)
        client.window.change_attributes(border_pixel=self.active_pixel)
        client.window.set_input_focus(X.RevertToPointerRoot, X.CurrentTime)
        client.window.configure(stack_mode=X.Above)
        if self.icccm.supports(client.window, "WM_TAKE_FOCUS"):
            self.icccm.send_protocol(client.window, "WM_TAKE_FOCUS", s.timestamp)
        s.focused = client
        s.dpy.flush()
        logger.debug("focus: %s", client.handle)

    def forget(self, client: ManagedClient):
        """Drop focus if it points at a client that is going away."""
        if self.session.focused is client:
            self.session.focused = None

    def _visible(self) -> List[ManagedClient]:
        return list(self.session.registry.clients_in(self.session.current))

    def focus_next(self):
        clients = self._visible()
        if not clients:
            return
        if self.focused not in clients:
            self.set_focus(clients[0])
            return
        idx = clients.index(self.focused)
        self.set_focus(clients[(idx + 1) % len(clients)])

    def focus_prev(self):
        clients = self._visible()
        if not clients:
            return
        if self.focused not in clients:
            self.set_focus(clients[-1])
            return
        idx = clients.index(self.focused)
        self.set_focus(clients[(idx - 1) % len(clients)])

    # ---------------------------
    # Close
    # ---------------------------
    def close_focused(self):
        client = self.focused
        if client is None:
            return
        if self.icccm.supports(client.window, "WM_DELETE_WINDOW"):
            logger.info("close: asking %s to close", client.handle)
            self.icccm.send_protocol(client.window, "WM_DELETE_WINDOW")
        else:
            logger.info("close: killing %s", client.handle)
            client.window.kill_client()
        self.session.dpy.flush()
