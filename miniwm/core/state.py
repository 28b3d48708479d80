from dataclasses import dataclass, field
from typing import Any, Optional

from Xlib import X

from miniwm.managers.registry import ManagedClient, Registry


@dataclass
class Session:
    """Process-wide state of one manager run, owned by the event loop."""
    dpy: Any
    root: Any
    screen_width: int
    screen_height: int
    workspaces: int
    registry: Registry = field(default_factory=Registry)
    current: int = 0
    focused: Optional[ManagedClient] = None
    running: bool = True
    # last server time seen on an input event
    timestamp: int = X.CurrentTime
