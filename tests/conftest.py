from collections.abc import Generator

import pytest

from sandbox_sync.anonymization.anonymizer import Anonymizer
from sandbox_sync.anonymization.mapper import UserIdMapper, UuidMapper
from sandbox_sync.config.settings import Settings
from sandbox_sync.database.models import ForeignKeyDescriptor, TableDescriptor
from sandbox_sync.sync.row_processor import RowProcessor
from tests.helpers import col

TEST_SALT = "test-salt"


@pytest.fixture()
def anonymizer() -> Anonymizer:
    return Anonymizer(TEST_SALT)


@pytest.fixture()
def row_processor(anonymizer: Anonymizer) -> RowProcessor:
    return RowProcessor(anonymizer, UserIdMapper(anonymizer), UuidMapper(anonymizer))


@pytest.fixture()
def user_table() -> TableDescriptor:
    return TableDescriptor(
        name="user",
        columns=(
            col("id", nullable=False),
            col("name", nullable=False),
            col("email"),
            col("phone_number"),
            col("image"),
        ),
    )


@pytest.fixture()
def profile_table() -> TableDescriptor:
    return TableDescriptor(
        name="profile",
        columns=(
            col("id", "uuid", nullable=False),
            col("user_id", nullable=False),
            col("type", "profile_type", nullable=False, is_enum=True),
            col("metadata", "jsonb"),
        ),
        foreign_keys=(
            ForeignKeyDescriptor(
                name="profile_user_id_user_id_fk",
                table="profile",
                columns=("user_id",),
                referenced_table="user",
                referenced_columns=("id",),
                on_delete="CASCADE",
            ),
        ),
    )


@pytest.fixture()
def consent_table() -> TableDescriptor:
    return TableDescriptor(
        name="minor_job_application_consent",
        columns=(
            col("id", "uuid", nullable=False),
            col("user_id"),
            col("profile_id", "uuid"),
            col("guardian_id", "uuid"),
        ),
    )


@pytest.fixture(autouse=True)
def _no_env_file(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep a developer's .env and sandbox env vars out of unit tests."""
    for name in (
        "DATABASE_URL",
        "POSTGRES_USER",
        "POSTGRES_PASSWORD",
        "POSTGRES_DB",
        "DATABASE_HOST",
        "DATABASE_PORT",
        "SANDBOX_DATABASE_URL",
        "SANDBOX_POSTGRES_USER",
        "SANDBOX_POSTGRES_PASSWORD",
        "SANDBOX_POSTGRES_DB",
        "SANDBOX_DATABASE_HOST",
        "SANDBOX_DATABASE_PORT",
        "SANDBOX_SALT",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setitem(Settings.model_config, "env_file", None)
    yield
