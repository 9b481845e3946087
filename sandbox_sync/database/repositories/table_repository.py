from collections.abc import Collection, Sequence
from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from sandbox_sync.database.connection import DatabasePool
from sandbox_sync.schema import ddl

# PostgreSQL wire protocol limit on bind parameters per statement.
MAX_BIND_PARAMETERS = 65535


class TableRepository:
    """Whole-table reads and writes against one database."""

    def __init__(
        self,
        pool: DatabasePool,
        insert_batch_size: int = 1000,
        schema: str | None = None,
    ) -> None:
        self._pool = pool
        self._schema = schema
        self._insert_batch_size = max(1, insert_batch_size)

    def fetch_all(self, table_name: str) -> list[dict[str, Any]]:
        """Materialize every row of *table_name* as dicts keyed by column name.

        Reads are qualified with the repository's schema when one is set.
        """
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(ddl.select_all(table_name, self._schema))
                return cur.fetchall()

    def truncate(self, table_name: str) -> None:
        with self._pool.connection() as conn:
            conn.execute(ddl.truncate_table(table_name))
            conn.commit()

    def insert_rows(
        self,
        table_name: str,
        rows: Sequence[dict[str, Any]],
        json_columns: Collection[str] = (),
    ) -> int:
        """Insert *rows* in one transaction using multi-row INSERT statements.

        Columns are taken from the first row. Values of *json_columns* are
        wrapped as JSONB.

        Returns:
            Number of rows inserted.
        """
        if not rows:
            return 0
        columns = list(rows[0].keys())
        rows_per_statement = max(
            1, min(self._insert_batch_size, MAX_BIND_PARAMETERS // len(columns))
        )

        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                for start in range(0, len(rows), rows_per_statement):
                    chunk = rows[start : start + rows_per_statement]
                    params = [
                        _adapt(row.get(column), column in json_columns)
                        for row in chunk
                        for column in columns
                    ]
                    cur.execute(ddl.insert_rows(table_name, columns, len(chunk)), params)
            conn.commit()
        return len(rows)


def _adapt(value: Any, is_json: bool) -> Any:
    if is_json and value is not None:
        return Jsonb(value)
    return value
