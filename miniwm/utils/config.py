# utils/config.py
"""
TOML configuration for miniwm.

Looks for ~/.config/miniwm/config.toml unless another path is given.
A missing file means defaults; a broken one raises ConfigError.
"""

import copy
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml

logger = logging.getLogger("miniwm.config")
logger.addHandler(logging.NullHandler())

CONFIG_PATH = Path("~/.config/miniwm/config.toml").expanduser()

_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


class ConfigError(Exception):
    """Invalid configuration."""


# =========================
# DEFAULTS
# =========================
DEFAULTS: Dict[str, Any] = {
    "terminal": "kitty",
    "browser": "firefox",
    "modifier": "Mod4",
    "workspaces": 3,
    "decorations": {
        "border_width": 2,
        "border_color_active": "#ffb52a",
        "border_color_inactive": "#333333",
    },
    # one allow-list per workspace, in priority order
    "allow": [
        {"classes": ["xterm", "terminal", "urxvt", "kitty"]},
        {"classes": ["firefox"]},
    ],
    # empty -> built from the default table in core/commands.py
    "keybindings": [],
}


class Config:
    def __init__(self, data: Optional[Dict[str, Any]] = None, path: Optional[Path] = None):
        self.path = path
        self.data = validate_config(data or {})

    # =======================
    # Programs
    # =======================
    @property
    def terminal(self) -> str:
        return os.environ.get("TERMINAL") or self.data["terminal"]

    @property
    def browser(self) -> str:
        return self.data["browser"]

    # =======================
    # Workspaces / policy
    # =======================
    @property
    def workspaces(self) -> int:
        return self.data["workspaces"]

    @property
    def allow_lists(self) -> List[List[str]]:
        return [list(entry.get("classes", [])) for entry in self.data["allow"]]

    # =======================
    # Keys
    # =======================
    @property
    def modifier(self) -> str:
        return self.data["modifier"]

    @property
    def keybindings(self) -> List[Dict[str, Any]]:
        return self.data["keybindings"]

    # =======================
    # Decorations
    # =======================
    @property
    def border_width(self) -> int:
        return self.data["decorations"]["border_width"]

    def get_color(self, name: str) -> str:
        return self.data["decorations"].get(name, "#FFFFFF")

    def get_pixel(self, name: str) -> int:
        return int(self.get_color(name)[1:], 16)


# =========================
# LOADER
# =========================

def load_config(path: Optional[Path] = None) -> Config:
    path = Path(path) if path else CONFIG_PATH
    if not path.exists():
        logger.warning("config not found at %s, using defaults", path)
        return Config(path=path)
    try:
        data = toml.load(path)
    except (OSError, toml.TomlDecodeError) as e:
        raise ConfigError(f"cannot read {path}: {e}")
    logger.info("config loaded from %s", path)
    return Config(data, path=path)


# =========================
# VALIDATION
# =========================

def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Fill in defaults and check types."""
    validated = copy.deepcopy(DEFAULTS)
    for key, value in cfg.items():
        if key == "decorations" and isinstance(value, dict):
            validated["decorations"].update(value)
        else:
            validated[key] = value

    for key in ("terminal", "browser", "modifier"):
        if not isinstance(validated[key], str):
            raise ConfigError(f"'{key}' must be a string")

    n = validated["workspaces"]
    if not isinstance(n, int) or isinstance(n, bool) or n < 2:
        raise ConfigError("'workspaces' must be an integer >= 2")

    # --- Decorations
    deco = validated["decorations"]
    bw = deco.get("border_width")
    if not isinstance(bw, int) or isinstance(bw, bool) or bw < 0:
        raise ConfigError("decorations.border_width must be a non-negative integer")
    for name in ("border_color_active", "border_color_inactive"):
        if not isinstance(deco.get(name), str) or not _COLOR_RE.match(deco[name]):
            raise ConfigError(f"decorations.{name} must look like #rrggbb")

    # --- Allow-lists
    allow = validated["allow"]
    if not isinstance(allow, list):
        raise ConfigError("'allow' must be a list of tables")
    if len(allow) > n:
        raise ConfigError(f"{len(allow)} allow-lists for {n} workspaces")
    for i, entry in enumerate(allow):
        if not isinstance(entry, dict) or not isinstance(entry.get("classes"), list):
            raise ConfigError(f"allow[{i}] needs a 'classes' list")
        if not all(isinstance(c, str) and c for c in entry["classes"]):
            raise ConfigError(f"allow[{i}].classes must contain non-empty strings")

    # --- Keybindings
    kb = validated["keybindings"]
    if not isinstance(kb, list):
        raise ConfigError("'keybindings' must be a list")
    for i, bind in enumerate(kb):
        if not isinstance(bind, dict):
            raise ConfigError(f"keybinding {i} must be a table")
        if not isinstance(bind.get("keysym"), str):
            raise ConfigError(f"keybinding {i} needs a 'keysym' string")
        if not isinstance(bind.get("modifiers", []), list):
            raise ConfigError(f"keybinding {i}: 'modifiers' must be a list")
        if not isinstance(bind.get("action"), str):
            raise ConfigError(f"keybinding {i} needs an 'action' string")

    return validated
