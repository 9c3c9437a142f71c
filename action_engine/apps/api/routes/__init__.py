"""Router namespace exports for FastAPI include hooks."""

from . import actions, health

__all__ = ["actions", "health"]
