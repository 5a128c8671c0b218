"""Domain layer: condition language, registry, and rule models.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
