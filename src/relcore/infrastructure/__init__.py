"""Infrastructure layer — database engine, schema, and the entity store.

This layer depends on stdlib, third-party libs (SQLAlchemy), and the
domain layer. It must never import from services, commands, or output.
"""
