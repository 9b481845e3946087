from collections.abc import Iterable

import psycopg

from sandbox_sync.database.connection import DatabasePool
from sandbox_sync.database.models import EnumDescriptor, SchemaSnapshot, TableDescriptor
from sandbox_sync.logging.logger import Log
from sandbox_sync.schema import ddl
from sandbox_sync.schema.exceptions import SchemaReplicationError
from sandbox_sync.sync.report import SyncReport


class SchemaReplicator:
    """Recreates enums, tables and foreign keys in the sandbox database.

    Order: enums -> tables (in snapshot order) -> foreign keys. Enum and table
    failures abort the run; foreign key failures are logged and skipped.
    """

    def __init__(self, target: DatabasePool, report: SyncReport) -> None:
        self._target = target
        self._report = report

    def replicate(self, snapshot: SchemaSnapshot) -> None:
        Log.info("Copying schema")
        self.create_enums(snapshot.enums)
        self.create_tables(snapshot.tables.values())
        self.add_foreign_keys(snapshot.tables.values())
        Log.info("Schema copied successfully")

    def create_enums(self, enums: Iterable[EnumDescriptor]) -> None:
        for enum in enums:
            if not enum.labels:
                Log.warning(f"Skipping enum {enum.name}: no values found")
                continue
            try:
                with self._target.connection() as conn:
                    conn.execute(ddl.drop_type(enum.name))
                    conn.execute(ddl.create_enum(enum))
                    conn.commit()
            except psycopg.Error as exc:
                raise SchemaReplicationError(f"Failed to create enum {enum.name}: {exc}") from exc
            self._report.enums_created.append(enum.name)
            Log.info(f"Created enum: {enum.name}")

    def create_tables(self, tables: Iterable[TableDescriptor]) -> None:
        for table in tables:
            try:
                with self._target.connection() as conn:
                    conn.execute(ddl.drop_table(table.name))
                    conn.execute(ddl.create_table(table))
                    conn.commit()
            except psycopg.Error as exc:
                raise SchemaReplicationError(f"Failed to create table {table.name}: {exc}") from exc
            self._report.tables_created.append(table.name)
            Log.info(f"Created table: {table.name}")

    def add_foreign_keys(self, tables: Iterable[TableDescriptor]) -> None:
        """Best effort: each constraint runs in its own transaction."""
        Log.info("Adding foreign key constraints")
        tables = list(tables)
        created = {table.name for table in tables}
        for table in tables:
            for fk in table.foreign_keys:
                if fk.referenced_table not in created:
                    reason = f"referenced table {fk.referenced_table} is not in the sandbox"
                    Log.warning(f"Skipped constraint {fk.name} for {table.name}: {reason}")
                    self._report.skip_constraint(table.name, fk.name, reason)
                    continue
                try:
                    with self._target.connection() as conn:
                        conn.execute(ddl.add_foreign_key(fk))
                        conn.commit()
                except psycopg.Error as exc:
                    Log.warning(f"Skipped constraint {fk.name} for {table.name}: {exc}")
                    self._report.skip_constraint(table.name, fk.name, str(exc))
                    continue
                self._report.constraints_added.append(fk.name)
                Log.info(f"Added constraint {fk.name} to {table.name}")
