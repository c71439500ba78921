"""Route group exports."""

from . import availability, health

__all__ = ["availability", "health"]
