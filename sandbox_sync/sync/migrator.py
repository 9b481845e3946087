import psycopg

from sandbox_sync.database.models import SchemaSnapshot, TableDescriptor
from sandbox_sync.database.repositories.table_repository import TableRepository
from sandbox_sync.logging.logger import Log
from sandbox_sync.policy.models import TablePolicy
from sandbox_sync.policy.registry import get_table_policy
from sandbox_sync.sync.report import SyncReport
from sandbox_sync.sync.row_processor import RowProcessor


class DataMigrator:
    """Copy table data source -> sandbox, anonymizing every row on the way."""

    def __init__(
        self,
        source: TableRepository,
        target: TableRepository,
        row_processor: RowProcessor,
        report: SyncReport,
    ) -> None:
        self._source = source
        self._target = target
        self._row_processor = row_processor
        self._report = report

    def migrate(self, snapshot: SchemaSnapshot) -> None:
        """Copy every included table, in snapshot (dependency) order."""
        Log.info("Copying data with anonymization")
        for table in snapshot.tables.values():
            policy = get_table_policy(table.name)
            if policy is None or not policy.include:
                continue
            self.migrate_table(table, policy)
        Log.info("Data copied")

    def migrate_table(self, table: TableDescriptor, policy: TablePolicy) -> int:
        """Copy one table. Insert failures are reported, not raised.

        Returns:
            Number of rows inserted into the sandbox.
        """
        Log.info(f"Processing table: {table.name}")
        rows = self._source.fetch_all(table.name)
        if not rows:
            Log.info(f"No data in {table.name}")
            self._report.rows_inserted[table.name] = 0
            return 0

        processed = [self._row_processor.process(table, policy, row) for row in rows]

        try:
            self._target.truncate(table.name)
        except psycopg.Error as exc:
            Log.warning(f"Could not truncate {table.name}, continuing: {exc}")

        try:
            inserted = self._target.insert_rows(table.name, processed, table.json_columns)
        except psycopg.Error as exc:
            Log.error(f"Error inserting into {table.name}: {exc}")
            self._report.fail_table(table.name, str(exc))
            return 0

        self._report.rows_inserted[table.name] = inserted
        Log.info(f"Inserted {inserted} rows into {table.name}")
        return inserted
