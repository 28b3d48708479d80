# layouts/columns.py
"""Equal-width column tiling for the visible workspace."""

from typing import List, NamedTuple, Optional

from miniwm.managers.registry import ManagedClient, Registry


class Placement(NamedTuple):
    client: ManagedClient
    x: int
    y: int
    width: int
    height: int


class Arrangement(NamedTuple):
    placements: List[Placement]
    hidden: List[ManagedClient]

    @property
    def focus_candidate(self) -> Optional[ManagedClient]:
        if self.placements:
            return self.placements[0].client
        return None


def column_spans(screen_width: int, count: int) -> List[tuple]:
    """
    Split [0, screen_width) into count (x, width) spans. Every column is
    screen_width // count wide except the last, which takes the remainder.
    """
    if count <= 0:
        return []
    base = screen_width // count
    spans = [(i * base, base) for i in range(count - 1)]
    last_x = (count - 1) * base
    spans.append((last_x, screen_width - last_x))
    return spans


def arrange(registry: Registry, current_workspace: int,
            screen_width: int, screen_height: int, border_width: int = 0) -> Arrangement:
    visible = list(registry.clients_in(current_workspace))
    hidden = [c for c in registry if c.workspace != current_workspace]
    inset = 2 * border_width
    placements = [
        Placement(client, x, 0, max(1, width - inset), max(1, screen_height - inset))
        for client, (x, width) in zip(visible, column_spans(screen_width, len(visible)))
    ]
    return Arrangement(placements, hidden)
