from sandbox_sync.anonymization.factory import AnonymizerFactory
from sandbox_sync.anonymization.mapper import UserIdMapper, UuidMapper
from sandbox_sync.config.settings import Settings
from sandbox_sync.database.connection import DatabasePool
from sandbox_sync.database.repositories.table_repository import TableRepository
from sandbox_sync.logging.logger import Log
from sandbox_sync.policy.registry import ordered_tables, validate_policies
from sandbox_sync.schema.introspector import SchemaIntrospector
from sandbox_sync.schema.replicator import SchemaReplicator
from sandbox_sync.sync.migrator import DataMigrator
from sandbox_sync.sync.report import SyncReport
from sandbox_sync.sync.row_processor import RowProcessor


class SandboxRunner:
    """Runs the sandbox commands.

    Pipeline: connect -> introspect -> enums -> tables -> foreign keys
    -> (sync only) data -> close connections.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def setup(self) -> SyncReport:
        """Create the sandbox schema only."""
        Log.info("Setting up sandbox database schema")
        report = self._run(SyncReport(command="setup"), copy_data=False)
        Log.info("Sandbox setup completed successfully")
        return report

    def sync(self) -> SyncReport:
        """Create the sandbox schema and copy anonymized data into it."""
        Log.info("Starting sandbox database sync")
        report = self._run(SyncReport(command="sync"), copy_data=True)
        Log.info("Sandbox sync completed successfully")
        return report

    def _run(self, report: SyncReport, copy_data: bool) -> SyncReport:
        # Configuration errors surface here, before any connection is made.
        row_processor = self._build_row_processor() if copy_data else None
        source = self._make_pool(self._settings.source_conninfo(), "source")
        target = self._make_pool(self._settings.target_conninfo(), "target")

        try:
            source.open()
            target.open()
            Log.info("Database connections established")

            introspector = SchemaIntrospector(source, self._settings.source_schema)
            tables = ordered_tables(introspector.list_tables())
            snapshot = introspector.introspect(tables)
            validate_policies(snapshot.tables)

            SchemaReplicator(target, report).replicate(snapshot)

            if row_processor is not None:
                migrator = DataMigrator(
                    source=TableRepository(source, schema=self._settings.source_schema),
                    target=TableRepository(target, self._settings.insert_batch_size),
                    row_processor=row_processor,
                    report=report,
                )
                migrator.migrate(snapshot)
        except Exception as exc:
            Log.error(f"Error during sandbox {report.command}: {exc}")
            raise
        finally:
            source.close()
            target.close()

        report.log_summary()
        return report

    def _build_row_processor(self) -> RowProcessor:
        anonymizer = AnonymizerFactory.create(self._settings)
        return RowProcessor(
            anonymizer=anonymizer,
            user_ids=UserIdMapper(anonymizer),
            uuids=UuidMapper(anonymizer),
        )

    def _make_pool(self, conninfo: str, name: str) -> DatabasePool:
        return DatabasePool(
            conninfo,
            name=name,
            min_size=self._settings.db_pool_min_size,
            max_size=self._settings.db_pool_max_size,
        )
