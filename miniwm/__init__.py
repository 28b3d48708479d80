"""miniwm: a tiling window manager for an allow-list of X11 applications."""

__version__ = "0.1.0"
