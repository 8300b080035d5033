"""Interactive multi-format image converter."""

__version__ = "1.0.0"
