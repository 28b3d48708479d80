"""
Shared pytest fixtures for miniwm tests.

Everything runs against fake Xlib objects that record the requests the
manager makes; no X server is needed.
"""

from types import SimpleNamespace

import pytest
from Xlib import X, XK
from Xlib.error import XError

from miniwm.core.events import EventDispatcher
from miniwm.core.state import Session
from miniwm.core.wm import WindowManager
from miniwm.utils.config import Config

SCREEN_W = 1200
SCREEN_H = 800


def error_data(code):
    return {"type": 0, "code": code, "sequence_number": 0, "resource_id": 0,
            "minor_opcode": 0, "major_opcode": 0}


class FakeBadWindow(XError):
    def __init__(self):
        Exception.__init__(self, "BadWindow")
        self._data = error_data(X.BadWindow)


class FakeDisplay:
    def __init__(self):
        self.atoms = {}
        self.keycodes = {}
        self.events = []
        self.flushed = 0
        self.closed = False

    def intern_atom(self, name, only_if_exists=False):
        return self.atoms.setdefault(name, 100 + len(self.atoms))

    def keysym_to_keycode(self, sym):
        return self.keycodes.setdefault(sym, 10 + len(self.keycodes))

    def keycode(self, keysym_str):
        return self.keysym_to_keycode(XK.string_to_keysym(keysym_str))

    def next_event(self):
        if not self.events:
            raise KeyboardInterrupt
        return self.events.pop(0)

    def flush(self):
        self.flushed += 1

    def sync(self):
        pass

    def close(self):
        self.closed = True


class FakeRoot:
    id = 1

    def __init__(self):
        self.redirect_error = None
        self.focus_calls = []
        self.grabs = set()
        self.event_mask = None

    def set_input_focus(self, revert_to, time, onerror=None):
        self.focus_calls.append((revert_to, time))

    def change_attributes(self, onerror=None, **keys):
        if self.redirect_error is not None and onerror is not None:
            onerror(self.redirect_error, None)
            return
        if "event_mask" in keys:
            self.event_mask = keys["event_mask"]

    def grab_key(self, keycode, modifiers, owner_events, pointer_mode, keyboard_mode, onerror=None):
        self.grabs.add((keycode, modifiers))

    def ungrab_key(self, keycode, modifiers, onerror=None):
        self.grabs.discard((keycode, modifiers))


class FakeWindow:
    def __init__(self, dpy, wid, wm_class=None, protocols=(), broken_class=False):
        self.display = dpy
        self.id = wid
        self.wm_class = wm_class
        self.protocol_names = list(protocols)
        self.broken_class = broken_class
        self.broken_configure = False
        self.mapped = False
        self.geometry = {}
        self.border_pixel = None
        self.event_mask = None
        self.focused = 0
        self.raised = 0
        self.killed = False
        self.sent = []
        self.map_calls = 0
        self.unmap_calls = 0

    def get_wm_class(self):
        if self.broken_class:
            raise FakeBadWindow()
        return self.wm_class

    def get_wm_protocols(self):
        return [self.display.intern_atom(n) for n in self.protocol_names]

    def change_attributes(self, onerror=None, **keys):
        if "border_pixel" in keys:
            self.border_pixel = keys["border_pixel"]
        if "event_mask" in keys:
            self.event_mask = keys["event_mask"]

    def configure(self, onerror=None, **keys):
        if self.broken_configure:
            raise FakeBadWindow()
        if keys.get("stack_mode") == X.Above:
            self.raised += 1
        self.geometry.update(keys)

    def get_attributes(self):
        return SimpleNamespace(map_state=X.IsViewable if self.mapped else X.IsUnmapped)

    def map(self, onerror=None):
        self.mapped = True
        self.map_calls += 1

    def unmap(self, onerror=None):
        self.mapped = False
        self.unmap_calls += 1

    def set_input_focus(self, revert_to, time, onerror=None):
        self.focused += 1

    def kill_client(self, onerror=None):
        self.killed = True

    def send_event(self, event, event_mask=0, propagate=0, onerror=None):
        self.sent.append(event)

    def __window__(self):
        return self.id

    def __repr__(self):
        return f"<FakeWindow {self.id} {self.wm_class}>"


@pytest.fixture
def dpy():
    return FakeDisplay()


@pytest.fixture
def root():
    return FakeRoot()


@pytest.fixture
def session(dpy, root):
    return Session(dpy, root, SCREEN_W, SCREEN_H, workspaces=3)


@pytest.fixture
def config():
    return Config({"decorations": {"border_width": 0}})


@pytest.fixture
def wm(session, config):
    manager = WindowManager(session, config)
    manager.load_bindings()
    return manager


@pytest.fixture
def dispatcher(wm):
    return EventDispatcher(wm)


@pytest.fixture
def make_window(dpy):
    """Factory fixture: make_window("xterm") gives a terminal-class window."""
    counter = iter(range(1000, 2000))

    def factory(klass=None, instance=None, protocols=(), wid=None, **kw):
        wm_class = None
        if klass is not None or instance is not None:
            wm_class = (instance if instance is not None else (klass or "").lower(), klass)
        return FakeWindow(dpy, wid if wid is not None else next(counter), wm_class, protocols, **kw)

    return factory


@pytest.fixture
def make_event():
    def factory(type_, **fields):
        fields.setdefault("send_event", False)
        return SimpleNamespace(type=type_, **fields)

    return factory


@pytest.fixture
def map_window(dispatcher, make_event):
    """Feed a MapRequest for a window through the dispatcher."""
    def mapper(window):
        dispatcher.dispatch(make_event(X.MapRequest, window=window))
        return window

    return mapper
