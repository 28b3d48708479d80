# core/events.py
"""
Event loop: one blocking next_event() at a time, dispatched by event type.
Event types without a handler are ignored.
"""

import logging
from typing import Any, Callable, Dict

from Xlib import X
from Xlib.error import XError

from miniwm.core.wm import WindowManager

logger = logging.getLogger("miniwm.events")
logger.addHandler(logging.NullHandler())


class EventDispatcher:
    def __init__(self, wm: WindowManager):
        self.wm = wm
        self.session = wm.session
        self.handlers: Dict[int, Callable[[Any], None]] = {
            X.MapRequest: self.handle_map_request,
            X.UnmapNotify: self.handle_unmap_notify,
            X.DestroyNotify: self.handle_destroy_notify,
            X.ConfigureRequest: self.handle_configure_request,
            X.EnterNotify: self.handle_enter_notify,
            X.KeyPress: self.handle_key_press,
        }
        self.waiting = False

    def run(self):
        while self.session.running:
            # signals may only break out of the blocking wait, never a handler
            self.waiting = True
            try:
                ev = self.session.dpy.next_event()
            except KeyboardInterrupt:
                logger.info("interrupted, leaving")
                break
            finally:
                self.waiting = False
            self.dispatch(ev)

    def stop(self, signum, frame):
        """SIGINT/SIGTERM handler: end the loop once the current event is done."""
        logger.info("signal %d received, stopping", signum)
        self.session.running = False
        if self.waiting:
            raise KeyboardInterrupt

    def dispatch(self, ev: Any):
        handler = self.handlers.get(ev.type)
        if handler is None:
            return
        try:
            handler(ev)
        except XError:
            logger.exception("X error while handling event type %d", ev.type)

    # -------------------------
    # Handlers
    # -------------------------
    def handle_map_request(self, ev: Any):
        logger.debug("MapRequest: %s", ev.window.id)
        self.wm.manage(ev.window)

    def handle_unmap_notify(self, ev: Any):
        # sent by the client itself, not the server
        if ev.send_event:
            return
        client = self.wm.registry.find(ev.window.id)
        if client is None:
            return
        if client.ignore_unmaps > 0:
            client.ignore_unmaps -= 1
            return
        logger.debug("UnmapNotify: %s", client.handle)
        self.wm.unmanage(client.handle)

    def handle_destroy_notify(self, ev: Any):
        logger.debug("DestroyNotify: %s", ev.window.id)
        self.wm.unmanage(ev.window.id)

    def handle_configure_request(self, ev: Any):
        values = {}
        mask = ev.value_mask
        if mask & X.CWX:
            values["x"] = ev.x
        if mask & X.CWY:
            values["y"] = ev.y
        if mask & X.CWWidth:
            values["width"] = ev.width
        if mask & X.CWHeight:
            values["height"] = ev.height
        if mask & X.CWSibling:
            values["sibling"] = ev.sibling
        if mask & X.CWStackMode:
            values["stack_mode"] = ev.stack_mode
        values["border_width"] = self.wm.config.border_width
        ev.window.configure(**values)
        self.session.dpy.flush()

    def handle_enter_notify(self, ev: Any):
        self.session.timestamp = ev.time
        if ev.mode != X.NotifyNormal or ev.detail == X.NotifyInferior:
            return
        client = self.wm.registry.find(ev.window.id)
        if client is None or client.workspace != self.session.current:
            return
        if client is not self.session.focused:
            self.wm.focus.set_focus(client)

    def handle_key_press(self, ev: Any):
        self.session.timestamp = ev.time
        self.wm.keybindings.handle_key_press(ev)
