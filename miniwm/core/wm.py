# core/wm.py
"""
Window manager core.

WindowManager ties the session state to the policy and the X requests:
- manage(): admit or kill a window on MapRequest
- unmanage(): forget a window that was unmapped or destroyed
- switch_workspace() / rearrange(): push the column layout to the server
- shutdown(): hide every managed window and release the display

connect() opens the display and claims substructure redirection on the root;
failing either is fatal for the process.
"""

from typing import Any, Optional
import logging

from Xlib import X, display, error

from miniwm.core import commands
from miniwm.core.classifier import Rejected, build_rules, classify, read_wm_class
from miniwm.core.icccm import ICCCM
from miniwm.core.keybindings import KeyBindings
from miniwm.core.state import Session
from miniwm.layouts.columns import arrange
from miniwm.managers.focus import FocusManager
from miniwm.managers.registry import ManagedClient, Registry
from miniwm.utils.config import Config

logger = logging.getLogger("miniwm.wm")
logger.addHandler(logging.NullHandler())

ROOT_EVENT_MASK = X.SubstructureRedirectMask | X.SubstructureNotifyMask
CLIENT_EVENT_MASK = X.EnterWindowMask


class StartupError(Exception):
    """The display cannot be opened or is already managed."""


class WindowManager:
    def __init__(self, session: Session, config: Config):
        self.session = session
        self.config = config
        self.rules = build_rules(config.allow_lists)
        self.icccm = ICCCM(session.dpy)
        self.focus = FocusManager(
            session, self.icccm,
            active_pixel=config.get_pixel("border_color_active"),
            inactive_pixel=config.get_pixel("border_color_inactive"),
        )
        self.keybindings = KeyBindings(session.dpy, session.root, config.modifier)

    @property
    def registry(self) -> Registry:
        return self.session.registry

    def load_bindings(self):
        binds = self.config.keybindings or commands.default_bindings(self.session.workspaces)
        for bind in binds:
            action = commands.resolve(self, bind)
            if action is not None:
                self.keybindings.add_binding(bind["keysym"], bind.get("modifiers", ["mod"]), action)
        logger.debug("%d key bindings loaded", len(self.keybindings))

    # ---------------------------
    # Manage / unmanage windows
    # ---------------------------
    def manage(self, window: Any) -> Optional[ManagedClient]:
        """Admit a window asking to be mapped, or kill it if it is not allowed."""
        if window.id in self.registry:
            logger.debug("manage: %s already managed", window.id)
            return None

        result = classify(read_wm_class(window), self.rules)
        if isinstance(result, Rejected):
            logger.info("manage: %s not allowed, killing its client", window.id)
            window.kill_client()
            self.session.dpy.flush()
            return None

        client = self.registry.add(window, result.workspace)
        if client is None:
            return None
        window.change_attributes(event_mask=CLIENT_EVENT_MASK,
                                 border_pixel=self.focus.inactive_pixel)
        window.configure(border_width=self.config.border_width)

        if result.workspace != self.session.current:
            self.switch_workspace(result.workspace)
        else:
            self.rearrange()
        return client

    def unmanage(self, handle: int) -> Optional[ManagedClient]:
        client = self.registry.remove(handle)
        if client is None:
            return None
        self.focus.forget(client)
        self.rearrange()
        return client

    # ---------------------------
    # Workspaces / layout
    # ---------------------------
    def switch_workspace(self, index: int):
        s = self.session
        if not 0 <= index < s.workspaces:
            logger.debug("switch_workspace: %d out of range", index)
            return
        if index == s.current:
            return
        logger.info("workspace %d -> %d", s.current, index)
        s.current = index
        self.rearrange()

    def rearrange(self):
        """Hide other workspaces, tile the current one, settle focus."""
        s = self.session
        bw = self.config.border_width
        layout = arrange(s.registry, s.current, s.screen_width, s.screen_height, bw)

        for client in layout.hidden:
            if client.mapped:
                # a window the client already withdrew yields no UnmapNotify
                if self._viewable(client):
                    client.window.unmap()
                    client.ignore_unmaps += 1
                client.mapped = False

        for p in layout.placements:
            p.client.window.configure(x=p.x, y=p.y, width=p.width, height=p.height,
                                      border_width=bw)
            if not p.client.mapped:
                p.client.window.map()
                p.client.mapped = True

        focused = s.focused
        if focused is None or focused.workspace != s.current or focused.handle not in s.registry:
            self.focus.set_focus(layout.focus_candidate)
        s.dpy.flush()

    def _viewable(self, client: ManagedClient) -> bool:
        try:
            attrs = client.window.get_attributes()
        except error.XError:
            return False
        return attrs.map_state == X.IsViewable

    # ---------------------------
    # Teardown
    # ---------------------------
    def shutdown(self):
        s = self.session
        logger.info("shutting down, releasing %d windows", len(s.registry))
        self.keybindings.ungrab_all_keys()
        for client in list(s.registry):
            client.window.unmap()
            s.registry.remove(client.handle)
        s.focused = None
        s.root.change_attributes(event_mask=X.NoEventMask)
        s.dpy.flush()
        s.dpy.close()


# ---------------------------
# Startup
# ---------------------------
def _log_x_error(err, request):
    # windows vanish between our requests all the time (BadWindow etc.)
    logger.debug("X error: %s", err)


def connect(config: Config, display_name: Optional[str] = None) -> WindowManager:
    try:
        dpy = display.Display(display_name)
    except error.DisplayError as e:
        raise StartupError(f"cannot open display: {e}")

    root = dpy.screen().root
    catch = error.CatchError(error.BadAccess)
    root.change_attributes(event_mask=ROOT_EVENT_MASK, onerror=catch)
    dpy.sync()
    if catch.get_error():
        dpy.close()
        raise StartupError("another window manager is already running")
    dpy.set_error_handler(_log_x_error)

    screen = dpy.screen()
    session = Session(dpy, root, screen.width_in_pixels, screen.height_in_pixels,
                      workspaces=config.workspaces)
    wm = WindowManager(session, config)
    wm.load_bindings()
    wm.keybindings.grab_keys()
    logger.info("connected to %s (%dx%d), %d workspaces", dpy.get_display_name(),
                session.screen_width, session.screen_height, session.workspaces)
    return wm
