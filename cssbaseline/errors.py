class ConfigurationError(ValueError):
    """Options that do not describe a valid configuration."""

class DatabaseError(ValueError):
    """A compatibility database that cannot be loaded."""
