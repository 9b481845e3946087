from urllib.parse import quote

from pydantic_settings import BaseSettings, SettingsConfigDict

from sandbox_sync.config.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Sandbox sync configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"

    # Source database: DATABASE_URL wins over the POSTGRES_* components.
    database_url: str = ""
    postgres_user: str = ""
    postgres_password: str = ""
    postgres_db: str = ""
    database_host: str = "localhost"
    database_port: int = 5432

    # Sandbox (target) database: SANDBOX_DATABASE_URL wins over the components.
    sandbox_database_url: str = ""
    sandbox_postgres_user: str = "sandbox_user"
    sandbox_postgres_password: str = "sandbox_password"
    sandbox_postgres_db: str = "jobstack_seeker_sandbox"
    sandbox_database_host: str = "localhost"
    sandbox_database_port: int = 5431

    sandbox_salt: str = ""
    source_schema: str = "public"

    db_pool_min_size: int = 1
    db_pool_max_size: int = 4
    insert_batch_size: int = 1000

    def source_conninfo(self) -> str:
        """Connection string for the source database.

        Raises:
            ConfigurationError: if neither DATABASE_URL nor the full set of
                POSTGRES_USER, POSTGRES_PASSWORD, POSTGRES_DB is configured.
        """
        if self.database_url:
            return self.database_url
        if not (self.postgres_user and self.postgres_password and self.postgres_db):
            raise ConfigurationError(
                "Either DATABASE_URL or (POSTGRES_USER, POSTGRES_PASSWORD, POSTGRES_DB) "
                "environment variables are required"
            )
        return _postgres_url(
            self.postgres_user,
            self.postgres_password,
            self.database_host,
            self.database_port,
            self.postgres_db,
        )

    def target_conninfo(self) -> str:
        """Connection string for the sandbox database (components have defaults)."""
        if self.sandbox_database_url:
            return self.sandbox_database_url
        return _postgres_url(
            self.sandbox_postgres_user,
            self.sandbox_postgres_password,
            self.sandbox_database_host,
            self.sandbox_database_port,
            self.sandbox_postgres_db,
        )


def _postgres_url(user: str, password: str, host: str, port: int, database: str) -> str:
    return f"postgres://{quote(user, safe='')}:{quote(password, safe='')}@{host}:{port}/{database}"
