class ConfigurationError(Exception):
    """Raised when required configuration is missing or inconsistent."""
