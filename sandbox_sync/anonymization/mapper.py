from collections.abc import Callable

from sandbox_sync.anonymization.anonymizer import Anonymizer


class IdentityMapper:
    """Run-scoped memo of original identifier -> anonymized identifier.

    The same original always resolves to the same anonymized value for the
    lifetime of the mapper, so a key anonymized in one table matches the
    reference anonymized in another.
    """

    def __init__(self, anonymize: Callable[[str], str]) -> None:
        self._anonymize = anonymize
        self._mapping: dict[str, str] = {}

    def get_anonymized(self, original_id: object) -> str:
        if original_id is None:
            return ""
        key = str(original_id)
        if not key:
            return ""
        if key not in self._mapping:
            self._mapping[key] = self._anonymize(key)
        return self._mapping[key]

    def mappings(self) -> dict[str, str]:
        """Copy of the current mapping, for debugging."""
        return dict(self._mapping)

    def clear(self) -> None:
        self._mapping.clear()


class UserIdMapper(IdentityMapper):
    """Maps user identifiers to ``usr_<hash16>``."""

    def __init__(self, anonymizer: Anonymizer) -> None:
        super().__init__(anonymizer.anonymize_user_id)


class UuidMapper(IdentityMapper):
    """Maps UUID keys to anonymized, still valid, UUID literals."""

    def __init__(self, anonymizer: Anonymizer) -> None:
        super().__init__(anonymizer.anonymize_uuid)
