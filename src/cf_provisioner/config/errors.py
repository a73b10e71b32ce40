"""Configuration error type."""


class ConfigError(Exception):
    """Raised for configuration loading / validation errors."""
