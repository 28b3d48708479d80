"""
Unit tests for the entry point: exit codes and startup failures.
"""

import signal
from types import SimpleNamespace

import pytest
from Xlib import X, error

from miniwm import main as entry
from miniwm.core.wm import StartupError, connect
from miniwm.utils.config import Config


@pytest.fixture(autouse=True)
def signal_handlers(monkeypatch):
    installed = {}
    monkeypatch.setattr(entry.signal, "signal",
                        lambda signum, handler: installed.__setitem__(signum, handler))
    monkeypatch.setattr(entry, "setup_logging", lambda verbose=False: None)
    return installed


@pytest.mark.unit
class TestMain:
    def test_startup_failure_exit_code(self, monkeypatch, tmp_path):
        def fail(config, display_name=None):
            raise StartupError("cannot open display: :99")

        monkeypatch.setattr(entry, "connect", fail)
        assert entry.main(["--config", str(tmp_path / "none.toml")]) == 1

    def test_normal_quit(self, monkeypatch, tmp_path, wm, dpy):
        monkeypatch.setattr(entry, "connect", lambda config, display_name=None: wm)
        dpy.events = []
        assert entry.main(["-c", str(tmp_path / "none.toml")]) == 0
        assert dpy.closed is True

    def test_bad_config_falls_back(self, monkeypatch, tmp_path, wm):
        path = tmp_path / "config.toml"
        path.write_text("workspaces = 1\n")
        seen = []

        def fake_connect(config, display_name=None):
            seen.append(config)
            return wm

        monkeypatch.setattr(entry, "connect", fake_connect)
        assert entry.main(["-c", str(path)]) == 0
        assert seen[0].workspaces == 3

    def test_sigterm_mid_handler_finishes_event(self, monkeypatch, tmp_path, wm, dpy,
                                                 session, make_window, make_event,
                                                 signal_handlers):
        monkeypatch.setattr(entry, "connect", lambda config, display_name=None: wm)
        win = make_window("XTerm")
        read_class = win.get_wm_class

        def terminated_while_reading():
            signal_handlers[signal.SIGTERM](signal.SIGTERM, None)
            return read_class()

        win.get_wm_class = terminated_while_reading
        later = make_event(X.MapRequest, window=make_window("XTerm"))
        dpy.events = [make_event(X.MapRequest, window=win), later]

        assert entry.main(["-c", str(tmp_path / "none.toml")]) == 0
        assert win.map_calls == 1
        assert win.killed is False
        assert dpy.events == [later]
        assert session.running is False
        assert dpy.closed is True

    def test_signal_while_waiting_ends_loop(self, monkeypatch, tmp_path, wm, dpy,
                                            signal_handlers):
        monkeypatch.setattr(entry, "connect", lambda config, display_name=None: wm)

        def interrupted_wait():
            signal_handlers[signal.SIGINT](signal.SIGINT, None)
            raise AssertionError("handler should have interrupted the wait")

        dpy.next_event = interrupted_wait
        assert entry.main(["-c", str(tmp_path / "none.toml")]) == 0
        assert dpy.closed is True


@pytest.mark.unit
class TestConnect:
    def test_display_error_is_startup_error(self, monkeypatch):
        def no_display(name=None):
            raise error.DisplayNameError(":99")

        monkeypatch.setattr("miniwm.core.wm.display.Display", no_display)
        with pytest.raises(StartupError):
            connect(Config(), ":99")

    def test_redirect_already_owned(self, monkeypatch, root):
        closed = []
        denied = error.BadAccess.__new__(error.BadAccess)
        denied._data = {"type": 0, "code": X.BadAccess, "sequence_number": 0,
                         "resource_id": 0, "minor_opcode": 0, "major_opcode": 0}
        root.redirect_error = denied

        class OwnedDisplay:
            def __init__(self, name=None):
                pass

            def screen(self):
                return SimpleNamespace(root=root, width_in_pixels=1200, height_in_pixels=800)

            def sync(self):
                pass

            def close(self):
                closed.append(True)

        monkeypatch.setattr("miniwm.core.wm.display.Display", OwnedDisplay)
        with pytest.raises(StartupError, match="another window manager"):
            connect(Config(), ":0")
        assert closed == [True]
        assert root.event_mask is None
