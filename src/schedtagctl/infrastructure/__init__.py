"""Infrastructure layer: SQLite persistence and the catalog container.

This layer depends on stdlib and third-party libs (SQLAlchemy).
It may build domain models from rows but must never import from
services, commands, or output.
"""
