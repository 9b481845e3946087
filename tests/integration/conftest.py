import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from sandbox_sync.config.settings import Settings

USER_ID = "user-1"
PROFILE_ID = "550e8400-e29b-41d4-a716-446655440000"

SOURCE_SCHEMA_SQL = [
    'DROP TABLE IF EXISTS contact, profile, account, "user" CASCADE',
    "DROP TYPE IF EXISTS profile_type CASCADE",
    "CREATE TYPE profile_type AS ENUM ('personal', 'business')",
    """
    CREATE TABLE "user" (
        id text PRIMARY KEY,
        name text NOT NULL,
        email text,
        phone_number varchar(20),
        image text
    )
    """,
    """
    CREATE TABLE profile (
        id uuid PRIMARY KEY,
        user_id text NOT NULL REFERENCES "user"(id) ON DELETE CASCADE,
        type profile_type NOT NULL,
        metadata jsonb
    )
    """,
    """
    CREATE TABLE contact (
        id text PRIMARY KEY,
        user_id text REFERENCES "user"(id),
        email text,
        phone_number text[]
    )
    """,
    "CREATE TABLE account (id text PRIMARY KEY, user_id text, password text)",
]


def _env_or_skip(name: str) -> str:
    value = os.environ.get(name, "")
    if not value:
        pytest.skip(f"{name} not set; integration tests need a source and a sandbox database")
    return value


@pytest.fixture(scope="session")
def source_url() -> str:
    return _env_or_skip("SANDBOX_TEST_SOURCE_URL")


@pytest.fixture(scope="session")
def target_url(source_url: str) -> str:
    url = _env_or_skip("SANDBOX_TEST_TARGET_URL")
    if url == source_url:
        pytest.skip("SANDBOX_TEST_TARGET_URL must point at a different database than the source")
    return url


@pytest.fixture
def test_settings(source_url: str, target_url: str) -> Settings:
    return Settings(
        database_url=source_url,
        sandbox_database_url=target_url,
        sandbox_salt="integration-salt",
    )


@pytest.fixture
def source_conn(source_url: str) -> Generator[psycopg.Connection[Any], None, None]:
    try:
        conn = psycopg.connect(source_url)
    except psycopg.OperationalError as e:
        pytest.skip(f"Source PostgreSQL not available: {e}")
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture
def target_conn(target_url: str) -> Generator[psycopg.Connection[Any], None, None]:
    try:
        conn = psycopg.connect(target_url)
    except psycopg.OperationalError as e:
        pytest.skip(f"Sandbox PostgreSQL not available: {e}")
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture
def seeded_source(source_conn: psycopg.Connection[Any]) -> psycopg.Connection[Any]:
    with source_conn.cursor() as cur:
        for statement in SOURCE_SCHEMA_SQL:
            cur.execute(statement)
        cur.execute(
            'INSERT INTO "user" (id, name, email, phone_number, image) VALUES (%s, %s, %s, %s, %s)',
            (USER_ID, "Asha Rao", "asha@example.in", "+919845012345", "https://cdn/asha.png"),
        )
        cur.execute(
            "INSERT INTO profile (id, user_id, type, metadata) VALUES (%s, %s, %s, %s::jsonb)",
            (PROFILE_ID, USER_ID, "personal", '{"name": "Asha", "pincode": "560001"}'),
        )
        cur.execute(
            "INSERT INTO contact (id, user_id, email, phone_number) VALUES (%s, %s, %s, %s)",
            ("contact-1", USER_ID, "asha.alt@example.in", ["+91 98450", "+91 98451"]),
        )
        cur.execute(
            "INSERT INTO account (id, user_id, password) VALUES (%s, %s, %s)",
            ("account-1", USER_ID, "hunter2"),
        )
    source_conn.commit()
    return source_conn
