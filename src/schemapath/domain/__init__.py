"""Domain layer — schema interface and classification enums.

This layer depends only on stdlib.
It must never import from core, services, or config.
"""
