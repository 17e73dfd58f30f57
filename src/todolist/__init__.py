"""
Todo list service.

A small HTTP CRUD API for todo items whose storage is chosen at startup:
an in-memory hash, a Redis hash or a SQLite table. The ASGI application
lives in todolist.main.
"""

__version__ = "0.1.0"
