from sandbox_sync.anonymization.anonymizer import Anonymizer
from sandbox_sync.config.settings import Settings


class AnonymizerFactory:
    """Creates the salted anonymizer for a sync run."""

    @classmethod
    def create(cls, settings: Settings) -> Anonymizer:
        """Create an anonymizer from SANDBOX_SALT.

        Raises:
            MissingSaltError: if no salt is configured.
        """
        return Anonymizer(settings.sandbox_salt)
