"""Store nested configuration trees as flat, path-addressed parameters."""

__version__ = "0.1.0"
