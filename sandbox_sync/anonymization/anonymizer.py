"""Deterministic, salted pseudonymization of column values.

Every anonymizer is a pure function of (value, salt): the same input always
produces the same output, which is what keeps foreign keys joinable after a
sync. Values are hashed with SHA-256 over ``str(value) + salt``.

Dispatch for a configured column:
1. ``remove`` nulls the value, ``keep`` passes it through.
2. Arrays are anonymized element by element.
3. ``hash`` / ``randomize`` use the rule's explicit ``ValueKind`` when set,
   otherwise the kind is guessed from the value shape and the column name.
"""

from __future__ import annotations

import hashlib
import re
from collections.abc import Callable, Sequence
from typing import Any, ClassVar

from sandbox_sync.anonymization.exceptions import MissingSaltError
from sandbox_sync.anonymization.models import AnonymizationMethod, ColumnRule, ValueKind


class Anonymizer:
    """Salted one-way anonymizer for emails, phones, names and identifiers."""

    HASH_LENGTH: ClassVar[int] = 16

    UUID_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
        re.IGNORECASE,
    )
    _PHONE_CHARS_RE: ClassVar[re.Pattern[str]] = re.compile(r"[\d+\-()]")

    def __init__(self, salt: str) -> None:
        if not salt:
            raise MissingSaltError(
                "SANDBOX_SALT environment variable is required for anonymization"
            )
        self._salt = salt
        self._by_kind: dict[ValueKind, Callable[[str], Any]] = {
            ValueKind.EMAIL: self.anonymize_email,
            ValueKind.PHONE: self.anonymize_phone,
            ValueKind.NAME: self.anonymize_name,
            ValueKind.ADDRESS: self.anonymize_address,
            ValueKind.PINCODE: self.anonymize_pincode,
            ValueKind.USER_ID: self.anonymize_user_id,
            ValueKind.UUID: self.anonymize_uuid,
            ValueKind.GENERIC: self.hash_value,
        }

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def _digest(self, value: object) -> str:
        return hashlib.sha256((str(value) + self._salt).encode("utf-8")).hexdigest()

    def hash_value(self, value: object) -> str:
        """16-char lowercase hex hash of *value*; empty string for None/''."""
        if value is None or value == "":
            return ""
        return self._digest(value)[: self.HASH_LENGTH]

    @staticmethod
    def _as_digits(hex_text: str) -> str:
        return "".join(str(int(ch, 16) % 10) for ch in hex_text)

    @classmethod
    def is_uuid(cls, value: object) -> bool:
        return isinstance(value, str) and cls.UUID_RE.match(value) is not None

    # ------------------------------------------------------------------
    # Shape-preserving anonymizers
    # ------------------------------------------------------------------

    def anonymize_email(self, email: str | None) -> str | None:
        """``<hash8>@<hash4>.<original tld>``; keeps the address shape only."""
        if not email:
            return None
        hashed = self.hash_value(email)
        domain = email.split("@", 1)[1] if "@" in email else "example.com"
        tld = domain.rsplit(".", 1)[-1] or "com"
        return f"{hashed[:8]}@{hashed[8:12]}.{tld}"

    def anonymize_phone(self, phone: str | None) -> str | None:
        """``+NN-NNNN-NNNN`` built from the hash, independent of the input length."""
        if not phone:
            return None
        digits = self._as_digits(self.hash_value(phone))
        return f"+{digits[0:2]}-{digits[2:6]}-{digits[6:10]}"

    def anonymize_name(self, name: str | None) -> str:
        if not name:
            return "Anonymous"
        return f"User_{self.hash_value(name)[:8]}"

    def anonymize_address(self, address: str | None) -> str:
        if not address:
            return "[ANONYMIZED]"
        return f"Address_{self.hash_value(address)[:8]}"

    def anonymize_pincode(self, pincode: str | None) -> str | None:
        if not pincode:
            return None
        return self._as_digits(self.hash_value(pincode))[:6].ljust(6, "0")

    def anonymize_uuid(self, value: object) -> str:
        """Canonical UUID literal derived from the full (untruncated) digest."""
        if value is None or value == "":
            return ""
        digest = self._digest(value)[:32]
        return (
            f"{digest[0:8]}-{digest[8:12]}-{digest[12:16]}-"
            f"{digest[16:20]}-{digest[20:32]}"
        )

    def anonymize_user_id(self, user_id: object) -> str:
        if user_id is None or user_id == "":
            return ""
        return f"usr_{self.hash_value(user_id)}"

    def anonymize_as(self, kind: ValueKind, value: str) -> Any:
        return self._by_kind[kind](value)

    # ------------------------------------------------------------------
    # Rule dispatch
    # ------------------------------------------------------------------

    def apply_rule(self, value: Any, rule: ColumnRule) -> Any:
        """Anonymize one column value according to *rule*."""
        if value is None:
            return None
        if rule.method is AnonymizationMethod.REMOVE:
            return None
        if rule.method is AnonymizationMethod.KEEP:
            return value

        if isinstance(value, (list, tuple)):
            return self._apply_to_array(value, rule)

        text = str(value)
        return self.anonymize_as(rule.kind or self.guess_kind(rule, text), text)

    def _apply_to_array(self, values: Sequence[Any], rule: ColumnRule) -> list[Any]:
        phone_like = rule.kind is ValueKind.PHONE or "phone" in rule.column
        result: list[Any] = []
        for item in values:
            if item is None:
                result.append(None)
            elif phone_like:
                result.append(self.anonymize_phone(str(item)))
            else:
                result.append(self.hash_value(item))
        return result

    def guess_kind(self, rule: ColumnRule, text: str) -> ValueKind:
        """Heuristic for rules without an explicit kind.

        Ambiguous by nature (``name`` also matches ``user_name`` and
        ``organization_name``); configure ``ColumnRule.kind`` instead where
        the column is known.
        """
        column = rule.column
        if rule.preserve_format:
            if "@" in text:
                return ValueKind.EMAIL
            if self._PHONE_CHARS_RE.search(text):
                return ValueKind.PHONE
        if column == "email":
            return ValueKind.EMAIL
        if "phone" in column:
            return ValueKind.PHONE
        if "name" in column:
            return ValueKind.NAME
        if column == "address":
            return ValueKind.ADDRESS
        if column == "pincode":
            return ValueKind.PINCODE
        if column.endswith("_id") and self.is_uuid(text):
            return ValueKind.UUID
        return ValueKind.GENERIC
