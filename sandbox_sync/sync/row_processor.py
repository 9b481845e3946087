"""Per-row anonymization with cross-table identity mapping.

Steps run in a fixed order for every row:
a. UUID primary keys of referenced tables go through the UUID mapper.
b. UUID foreign keys go through the UUID mapper, keyed by the original value.
c. The table's column rules run (minus the foreign keys handled in b).
d. Other UUID columns changed by c are re-derived through the UUID mapper if
   they no longer hold a valid UUID literal.
e. The table's custom transform runs.
f. User id columns are mapped from their original values through the user
   mapper, so they match the id written for the user's own row.
"""

import uuid
from typing import Any

from sandbox_sync.anonymization.anonymizer import Anonymizer
from sandbox_sync.anonymization.mapper import UserIdMapper, UuidMapper
from sandbox_sync.anonymization.models import AnonymizationMethod, ColumnRule, ValueKind
from sandbox_sync.database.models import TableDescriptor
from sandbox_sync.policy.models import TablePolicy

UUID_PRIMARY_KEY_TABLES = frozenset({"profile", "guardian_consent"})
UUID_FOREIGN_KEY_COLUMNS = ("profile_id", "guardian_id", "guardian_consent_id")
USER_ID_COLUMNS = frozenset({"user_id", "seeker_id"})


def _uuid_text(value: Any) -> str | None:
    """Canonical text of a UUID value, or None if it is not UUID-shaped."""
    if isinstance(value, uuid.UUID):
        return str(value)
    if Anonymizer.is_uuid(value):
        return value
    return None


def is_user_id_column(column: str) -> bool:
    return column in USER_ID_COLUMNS or "user_id" in column or "userId" in column


class RowProcessor:
    """Anonymizes source rows using mappers shared across the whole run."""

    def __init__(
        self,
        anonymizer: Anonymizer,
        user_ids: UserIdMapper,
        uuids: UuidMapper,
    ) -> None:
        self._anonymizer = anonymizer
        self._user_ids = user_ids
        self._uuids = uuids

    def process(
        self,
        table: TableDescriptor,
        policy: TablePolicy,
        row: dict[str, Any],
    ) -> dict[str, Any]:
        processed = dict(row)

        # a. primary keys referenced from other tables
        if table.name in UUID_PRIMARY_KEY_TABLES:
            original_id = _uuid_text(row.get("id"))
            if original_id:
                processed["id"] = self._uuids.get_anonymized(original_id)

        # b. UUID foreign keys
        for column in UUID_FOREIGN_KEY_COLUMNS:
            original = _uuid_text(row.get(column))
            if original:
                processed[column] = self._uuids.get_anonymized(original)

        # c. column rules
        for rule in policy.rules:
            if rule.column in UUID_FOREIGN_KEY_COLUMNS or rule.column not in processed:
                continue
            processed[rule.column] = self._apply_rule(processed[rule.column], rule)

        # d. UUID columns must still hold UUID literals
        for column in table.uuid_columns:
            if column == "id" or column in UUID_FOREIGN_KEY_COLUMNS:
                continue
            original = row.get(column)
            current = processed.get(column)
            if original is None or current is None:
                continue
            if str(current) != str(original) and _uuid_text(current) is None:
                processed[column] = self._uuids.get_anonymized(str(original))

        # e. custom transform
        if policy.transform is not None:
            processed = policy.transform(processed)

        # f. user references, keyed by the original value
        user_rule_columns = {
            rule.column for rule in policy.rules if rule.kind is ValueKind.USER_ID
        }
        for column in list(processed):
            if not (is_user_id_column(column) or column in user_rule_columns):
                continue
            if processed[column] and row.get(column) is not None:
                processed[column] = self._user_ids.get_anonymized(row[column])

        return processed

    def _apply_rule(self, value: Any, rule: ColumnRule) -> Any:
        if value is None or rule.method in (AnonymizationMethod.REMOVE, AnonymizationMethod.KEEP):
            return self._anonymizer.apply_rule(value, rule)
        if rule.kind is ValueKind.USER_ID:
            return self._user_ids.get_anonymized(value)
        if rule.kind is ValueKind.UUID:
            return self._uuids.get_anonymized(value)
        return self._anonymizer.apply_rule(value, rule)
