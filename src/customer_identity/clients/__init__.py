"""Clients for downstream services."""

from .orders import OrderServiceClient

__all__ = ["OrderServiceClient"]
