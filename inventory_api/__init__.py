"""Inventory CRUD service: FastAPI routes over a SQL-backed repository."""

__version__ = "0.1.0"
