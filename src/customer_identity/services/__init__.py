"""Application services."""

from .customers import CustomerService

__all__ = ["CustomerService"]
