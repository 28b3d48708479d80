# managers/registry.py
"""
Client registry.

- ManagedClient: an accepted X window plus the workspace it belongs to.
- Registry: handle (X window id) -> ManagedClient, kept in insertion order.
  Insertion order is the tiling and focus-cycling order: the oldest window of
  a workspace gets the first column.

clients_in() is a generator over live state; callers that mutate the
registry while walking it must take a list() first.
"""

from typing import Any, Dict, Iterator, Optional
import logging

logger = logging.getLogger("miniwm.registry")
logger.addHandler(logging.NullHandler())


class ManagedClient:
    def __init__(self, window: Any, workspace: int):
        self.window = window
        self.workspace = workspace
        # whether the manager last mapped (True) or hid (False) the window
        self.mapped = False
        # server UnmapNotify events still expected from our own unmap requests
        self.ignore_unmaps = 0

    @property
    def handle(self) -> int:
        return self.window.id

    def __repr__(self):
        return f"<ManagedClient id={self.handle} ws={self.workspace} mapped={self.mapped}>"


class Registry:
    def __init__(self):
        self._clients: Dict[int, ManagedClient] = {}

    def add(self, window: Any, workspace: int) -> Optional[ManagedClient]:
        """Register a window. Returns None if the handle is already managed."""
        handle = window.id
        if handle in self._clients:
            logger.debug("add: %s already managed", handle)
            return None
        client = ManagedClient(window, workspace)
        self._clients[handle] = client
        logger.info("add: managing %s on workspace %d", handle, workspace)
        return client

    def remove(self, handle: int) -> Optional[ManagedClient]:
        client = self._clients.pop(handle, None)
        if client is not None:
            logger.info("remove: released %s", handle)
        return client

    def find(self, handle: int) -> Optional[ManagedClient]:
        return self._clients.get(handle)

    def clients_in(self, workspace: int) -> Iterator[ManagedClient]:
        for client in self._clients.values():
            if client.workspace == workspace:
                yield client

    def __contains__(self, handle) -> bool:
        return handle in self._clients

    def __iter__(self) -> Iterator[ManagedClient]:
        return iter(self._clients.values())

    def __len__(self) -> int:
        return len(self._clients)
