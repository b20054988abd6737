"""Inventory API: a product CRUD service backed by PostgreSQL."""

__version__ = "1.0.0"
