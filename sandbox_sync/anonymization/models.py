from dataclasses import dataclass
from enum import Enum


class AnonymizationMethod(str, Enum):
    HASH = "hash"
    REMOVE = "remove"
    RANDOMIZE = "randomize"  # deterministic: same output as HASH
    KEEP = "keep"


class ValueKind(str, Enum):
    """Shape of the value a column holds, used to pick the anonymizer."""

    EMAIL = "email"
    PHONE = "phone"
    NAME = "name"
    ADDRESS = "address"
    PINCODE = "pincode"
    USER_ID = "user_id"
    UUID = "uuid"
    GENERIC = "generic"


@dataclass(frozen=True)
class ColumnRule:
    """How one column of a table is anonymized.

    ``kind`` is optional; rules without one fall back to guessing the shape
    from the column name and the value itself.
    """

    column: str
    method: AnonymizationMethod = AnonymizationMethod.HASH
    preserve_format: bool = False
    kind: ValueKind | None = None
