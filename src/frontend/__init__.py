"""HTTP binding for the completion engine (Flask)."""
from .web import app, main, set_index

__all__ = ["app", "main", "set_index"]
