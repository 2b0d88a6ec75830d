"""Git workspace lifecycle management for agent sandboxes."""

__version__ = "0.1.0"
