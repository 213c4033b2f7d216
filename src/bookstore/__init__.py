"""Book store service.

Record management for the ``books`` table: create, read, update and delete
operations over a pooled PostgreSQL connection, exposed through FastAPI.
"""

__version__ = "0.1.0"
