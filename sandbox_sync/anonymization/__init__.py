from sandbox_sync.anonymization.anonymizer import Anonymizer
from sandbox_sync.anonymization.factory import AnonymizerFactory
from sandbox_sync.anonymization.mapper import IdentityMapper, UserIdMapper, UuidMapper
from sandbox_sync.anonymization.models import AnonymizationMethod, ColumnRule, ValueKind

__all__ = [
    "AnonymizationMethod",
    "Anonymizer",
    "AnonymizerFactory",
    "ColumnRule",
    "IdentityMapper",
    "UserIdMapper",
    "UuidMapper",
    "ValueKind",
]
