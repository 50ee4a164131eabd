"""FastAPI routers acting as controllers in the MVC architecture."""

from . import analysis, auth, demos, uploads

__all__ = ["analysis", "auth", "demos", "uploads"]
