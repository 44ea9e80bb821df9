"""Error types."""


class ConfigurationError(ValueError):
    """Invalid parameters detected before any pixel is processed."""
