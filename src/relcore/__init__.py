"""relcore — command execution kernel for multi-tenant relationship management."""

__version__ = "0.1.0"
