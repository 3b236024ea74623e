"""Built-in plugins shipped with relcore."""
