"""Which tables reach the sandbox, and how each one is scrubbed.

Tables missing from ``SANITIZATION_POLICY`` are never exported.
"""

from collections.abc import Iterable, Mapping

from sandbox_sync.anonymization.models import AnonymizationMethod, ColumnRule, ValueKind
from sandbox_sync.database.models import TableDescriptor
from sandbox_sync.logging.logger import Log
from sandbox_sync.policy.exceptions import PolicyValidationError
from sandbox_sync.policy.models import TablePolicy
from sandbox_sync.policy.transforms import scrub_application_contact, strip_profile_metadata

HASH = AnonymizationMethod.HASH
REMOVE = AnonymizationMethod.REMOVE


def _user_ref(column: str) -> ColumnRule:
    return ColumnRule(column, HASH, kind=ValueKind.USER_ID)


def _uuid_ref(column: str) -> ColumnRule:
    return ColumnRule(column, HASH, kind=ValueKind.UUID)


def _email(column: str) -> ColumnRule:
    return ColumnRule(column, HASH, preserve_format=True, kind=ValueKind.EMAIL)


def _phone(column: str) -> ColumnRule:
    return ColumnRule(column, HASH, preserve_format=True, kind=ValueKind.PHONE)


def _name(column: str) -> ColumnRule:
    return ColumnRule(column, HASH, kind=ValueKind.NAME)


SANITIZATION_POLICY: dict[str, TablePolicy] = {
    "user": TablePolicy(
        include=True,
        rules=(
            _email("email"),
            _phone("phone_number"),
            _name("name"),
            _user_ref("id"),
            ColumnRule("image", REMOVE),
        ),
    ),
    "organization": TablePolicy(include=True),
    "job_posting": TablePolicy(include=True, rules=(_user_ref("created_by"),)),
    "job_application": TablePolicy(
        include=True,
        rules=(_name("user_name"), _user_ref("user_id")),
        transform=scrub_application_contact,
    ),
    # Address, pincode and GPS stay as-is; reports draw maps from them.
    "location": TablePolicy(include=True, rules=(_user_ref("user_id"),)),
    "contact": TablePolicy(
        include=True,
        rules=(_email("email"), _phone("phone_number"), _user_ref("user_id")),
    ),
    "profile": TablePolicy(
        include=True,
        rules=(_user_ref("user_id"),),
        transform=strip_profile_metadata,
    ),
    "profile_location": TablePolicy(include=True),
    "profile_contact": TablePolicy(include=True),
    "member": TablePolicy(include=True, rules=(_user_ref("user_id"),)),
    "team": TablePolicy(include=True),
    "team_member": TablePolicy(include=True, rules=(_user_ref("user_id"),)),
    "guardian_consent": TablePolicy(
        include=True,
        rules=(
            _email("user_email"),
            _phone("user_phone"),
            _name("guardian_name"),
            _email("guardian_email"),
            _phone("guardian_phone"),
        ),
    ),
    "minor_job_application_consent": TablePolicy(
        include=True,
        rules=(_user_ref("user_id"), _uuid_ref("profile_id"), _uuid_ref("guardian_id")),
    ),
    "user_consent": TablePolicy(include=True, rules=(_user_ref("user_id"),)),
    "application_consent": TablePolicy(
        include=True,
        rules=(_user_ref("seeker_id"), _uuid_ref("guardian_consent_id")),
    ),
    # Auth, session and secret-bearing tables never leave production.
    "account": TablePolicy(include=False),
    "verification": TablePolicy(include=False),
    "apikey": TablePolicy(include=False),
    "invitation": TablePolicy(include=False),
    "session": TablePolicy(include=False),
    "session_history": TablePolicy(include=False),
}

# Parents before children.
SYNC_ORDER: tuple[str, ...] = (
    "organization",
    "user",
    "team",
    "member",
    "team_member",
    "location",
    "contact",
    "profile",
    "profile_location",
    "profile_contact",
    "job_posting",
    "guardian_consent",
    "minor_job_application_consent",
    "user_consent",
    "application_consent",
    "job_application",
)


def get_table_policy(table_name: str) -> TablePolicy | None:
    return SANITIZATION_POLICY.get(table_name)


def should_include_table(table_name: str) -> bool:
    policy = get_table_policy(table_name)
    return policy is not None and policy.include


def ordered_tables(source_tables: Iterable[str]) -> list[str]:
    """Included source tables: ``SYNC_ORDER`` first, then the rest in source order."""
    available = [name for name in source_tables if should_include_table(name)]
    ordered = [name for name in SYNC_ORDER if name in available]
    ordered.extend(name for name in available if name not in SYNC_ORDER)
    return ordered


def validate_policies(tables: Mapping[str, TableDescriptor]) -> None:
    """Check every configured column exists in the introspected tables.

    Tables that are configured but absent from the source are skipped.

    Raises:
        PolicyValidationError: listing every rule that names a missing column.
    """
    problems: list[str] = []
    for table_name, policy in SANITIZATION_POLICY.items():
        if not policy.include:
            continue
        table = tables.get(table_name)
        if table is None:
            Log.debug(f"Policy table '{table_name}' not present in source, skipping validation")
            continue
        for rule in policy.rules:
            if not table.has_column(rule.column):
                problems.append(f"{table_name}.{rule.column}")

    if problems:
        raise PolicyValidationError(
            f"Anonymization rules reference unknown columns: {', '.join(problems)}"
        )
