"""Domain layer — line framing and the error taxonomy.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""
