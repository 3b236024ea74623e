"""Service layer — the command kernel and every business command.

Services may import from domain, infrastructure, and plugins.
They must never import from commands or output.
"""
