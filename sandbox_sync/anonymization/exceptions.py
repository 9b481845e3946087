from sandbox_sync.config.exceptions import ConfigurationError


class MissingSaltError(ConfigurationError):
    """Raised when anonymization is requested without SANDBOX_SALT."""
