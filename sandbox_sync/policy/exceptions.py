from sandbox_sync.config.exceptions import ConfigurationError


class PolicyValidationError(ConfigurationError):
    """Raised when a table policy does not match the introspected schema."""
