from dataclasses import dataclass, field

from sandbox_sync.logging.logger import Log


@dataclass(frozen=True)
class SkippedConstraint:
    table: str
    constraint: str
    reason: str


@dataclass(frozen=True)
class FailedTable:
    table: str
    reason: str


@dataclass
class SyncReport:
    """Outcome of one setup/sync run, including the failures that did not abort it."""

    command: str
    enums_created: list[str] = field(default_factory=list)
    tables_created: list[str] = field(default_factory=list)
    constraints_added: list[str] = field(default_factory=list)
    constraints_skipped: list[SkippedConstraint] = field(default_factory=list)
    rows_inserted: dict[str, int] = field(default_factory=dict)
    failed_tables: list[FailedTable] = field(default_factory=list)

    def skip_constraint(self, table: str, constraint: str, reason: str) -> None:
        self.constraints_skipped.append(SkippedConstraint(table, constraint, reason))

    def fail_table(self, table: str, reason: str) -> None:
        self.failed_tables.append(FailedTable(table, reason))

    @property
    def total_rows(self) -> int:
        return sum(self.rows_inserted.values())

    def log_summary(self) -> None:
        Log.info(
            f"Sandbox {self.command} summary: {len(self.enums_created)} enums, "
            f"{len(self.tables_created)} tables, {len(self.constraints_added)} constraints added"
        )
        if self.command == "sync":
            Log.info(f"Copied {self.total_rows} rows across {len(self.rows_inserted)} tables")
        for skipped in self.constraints_skipped:
            Log.warning(
                f"Constraint {skipped.constraint} on {skipped.table} skipped: {skipped.reason}"
            )
        for failed in self.failed_tables:
            Log.warning(f"Table {failed.table} was not copied: {failed.reason}")
