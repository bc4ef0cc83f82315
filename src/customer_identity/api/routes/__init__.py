"""Route group exports."""

from . import auth, customers, health

__all__ = ["auth", "customers", "health"]
