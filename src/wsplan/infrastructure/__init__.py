"""Infrastructure layer — manifest discovery, JSONC, artifact files, graph engine.

This layer depends on stdlib and third-party libs (json5, ruamel.yaml, NetworkX).
It may import from domain, never from services, commands, or output.
The service layer bridges between domain models and infrastructure.
"""
