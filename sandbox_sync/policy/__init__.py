from sandbox_sync.policy.models import TablePolicy
from sandbox_sync.policy.registry import (
    SANITIZATION_POLICY,
    SYNC_ORDER,
    get_table_policy,
    ordered_tables,
    should_include_table,
    validate_policies,
)

__all__ = [
    "SANITIZATION_POLICY",
    "SYNC_ORDER",
    "TablePolicy",
    "get_table_policy",
    "ordered_tables",
    "should_include_table",
    "validate_policies",
]
