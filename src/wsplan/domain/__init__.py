"""Domain layer — project descriptors, dependency graph, artifacts.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
