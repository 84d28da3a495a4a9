"""Tour lesson server, exercise helpers and reference solutions."""

__version__ = "0.1.0"