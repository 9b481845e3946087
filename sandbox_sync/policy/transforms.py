"""Row transforms for tables whose PII lives inside JSON payloads."""

from typing import Any

REDACTED = "[ANONYMIZED]"

APPLICATION_CONTACT_PII_KEYS = ("email", "phone_number")
PROFILE_METADATA_PII_KEYS = ("email", "phone", "phoneNumber", "name")


def scrub_application_contact(row: dict[str, Any]) -> dict[str, Any]:
    """Redact email/phone inside ``job_application.contact``; location data stays."""
    sanitized = dict(row)
    contact = sanitized.get("contact")
    if isinstance(contact, dict):
        contact = dict(contact)
        for key in APPLICATION_CONTACT_PII_KEYS:
            if contact.get(key):
                contact[key] = REDACTED
        sanitized["contact"] = contact
    return sanitized


def strip_profile_metadata(row: dict[str, Any]) -> dict[str, Any]:
    """Drop user PII keys from ``profile.metadata``, keeping everything else."""
    sanitized = dict(row)
    metadata = sanitized.get("metadata")
    if isinstance(metadata, dict):
        sanitized["metadata"] = {
            key: value
            for key, value in metadata.items()
            if not (key in PROFILE_METADATA_PII_KEYS and value)
        }
    return sanitized
