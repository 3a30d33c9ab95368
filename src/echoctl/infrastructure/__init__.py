"""Infrastructure layer — listening sockets, connections, line streams.

This layer depends on stdlib sockets, structlog, the domain layer,
and the config models.
It must never import from services, commands, or output.
"""
