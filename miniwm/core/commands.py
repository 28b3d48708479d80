import functools
import logging
from typing import Any, Callable, Dict, List, Optional

from miniwm.utils import launcher

logger = logging.getLogger("miniwm.commands")
logger.addHandler(logging.NullHandler())


# =======================
# Actions
# =======================
def spawn_terminal(wm):
    launcher.spawn(wm.config.terminal)


def spawn_browser(wm):
    launcher.spawn(wm.config.browser)


def spawn(wm, command: str):
    launcher.spawn(command)


def switch_workspace(wm, index: int):
    wm.switch_workspace(int(index))


def focus_next(wm):
    wm.focus.focus_next()


def focus_prev(wm):
    wm.focus.focus_prev()


def close_window(wm):
    wm.focus.close_focused()


def quit_wm(wm):
    """Stop the event loop; teardown happens once the loop returns."""
    logger.info("quit requested")
    wm.session.running = False


COMMANDS: Dict[str, Callable[..., None]] = {
    "spawn_terminal": spawn_terminal,
    "spawn_browser": spawn_browser,
    "spawn": spawn,
    "switch_workspace": switch_workspace,
    "focus_next": focus_next,
    "focus_prev": focus_prev,
    "close_window": close_window,
    "quit": quit_wm,
}


# =======================
# Binding table
# =======================
def default_bindings(workspaces: int) -> List[Dict[str, Any]]:
    binds = [
        {"keysym": "Return", "modifiers": ["mod"], "action": "spawn_terminal"},
        {"keysym": "b", "modifiers": ["mod"], "action": "spawn_browser"},
        {"keysym": "h", "modifiers": ["mod"], "action": "focus_prev"},
        {"keysym": "l", "modifiers": ["mod"], "action": "focus_next"},
        {"keysym": "c", "modifiers": ["mod", "Shift"], "action": "close_window"},
        {"keysym": "q", "modifiers": ["mod", "Shift"], "action": "quit"},
    ]
    # digit keys only reach 9
    for i in range(min(workspaces, 9)):
        binds.append({"keysym": str(i + 1), "modifiers": ["mod"],
                      "action": "switch_workspace", "args": [i]})
    return binds


def resolve(wm, bind: Dict[str, Any]) -> Optional[Callable[[], None]]:
    """Turn a binding entry into a zero-argument callable bound to wm."""
    func = COMMANDS.get(bind["action"])
    if func is None:
        logger.warning("unknown action in keybindings: %s", bind["action"])
        return None
    args = bind.get("args", [])
    if not isinstance(args, list):
        args = [args]
    return functools.partial(func, wm, *args)
