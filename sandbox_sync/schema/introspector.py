from collections.abc import Iterable
from typing import Any

import psycopg
from psycopg.rows import dict_row

from sandbox_sync.database.connection import DatabasePool
from sandbox_sync.database.models import (
    ColumnDescriptor,
    EnumDescriptor,
    ForeignKeyDescriptor,
    KeyConstraintDescriptor,
    SchemaSnapshot,
    TableDescriptor,
)
from sandbox_sync.logging.logger import Log
from sandbox_sync.schema.exceptions import IntrospectionError

# pg_constraint.confdeltype codes
ON_DELETE_ACTIONS: dict[str, str] = {
    "a": "NO ACTION",
    "r": "RESTRICT",
    "c": "CASCADE",
    "n": "SET NULL",
    "d": "SET DEFAULT",
}

_TABLES_SQL = """
    SELECT tablename
    FROM pg_tables
    WHERE schemaname = %s
    ORDER BY tablename
"""

_ENUMS_SQL = """
    SELECT
        t.typname AS enum_name,
        array_agg(e.enumlabel ORDER BY e.enumsortorder)::text[] AS enum_values
    FROM pg_type t
    JOIN pg_enum e ON t.oid = e.enumtypid
    JOIN pg_namespace n ON t.typnamespace = n.oid
    WHERE n.nspname = %s
    GROUP BY t.typname
    ORDER BY t.typname
"""

_COLUMNS_SQL = """
    SELECT
        a.attname AS column_name,
        t.typname AS udt_name,
        t.typcategory AS type_category,
        elem.typname AS element_type,
        elem.typcategory AS element_category,
        a.attnotnull AS not_null
    FROM pg_attribute a
    JOIN pg_class c ON a.attrelid = c.oid
    JOIN pg_namespace n ON c.relnamespace = n.oid
    JOIN pg_type t ON a.atttypid = t.oid
    LEFT JOIN pg_type elem ON t.typcategory = 'A' AND elem.oid = t.typelem
    WHERE n.nspname = %s
      AND c.relname = %s
      AND a.attnum > 0
      AND NOT a.attisdropped
    ORDER BY a.attnum
"""

_FOREIGN_KEYS_SQL = """
    SELECT
        con.conname AS constraint_name,
        src.relname AS table_name,
        la.attname AS column_name,
        ref.relname AS foreign_table_name,
        ra.attname AS foreign_column_name,
        con.confdeltype AS on_delete,
        k.ord AS position
    FROM pg_constraint con
    JOIN pg_class src ON src.oid = con.conrelid
    JOIN pg_namespace n ON n.oid = src.relnamespace
    JOIN pg_class ref ON ref.oid = con.confrelid
    CROSS JOIN LATERAL unnest(con.conkey, con.confkey)
        WITH ORDINALITY AS k(local_attnum, foreign_attnum, ord)
    JOIN pg_attribute la ON la.attrelid = con.conrelid AND la.attnum = k.local_attnum
    JOIN pg_attribute ra ON ra.attrelid = con.confrelid AND ra.attnum = k.foreign_attnum
    WHERE con.contype = 'f'
      AND n.nspname = %s
      AND src.relname = %s
    ORDER BY con.conname, k.ord
"""


_KEYS_SQL = """
    SELECT
        con.conname AS constraint_name,
        con.contype AS constraint_type,
        a.attname AS column_name,
        k.ord AS position
    FROM pg_constraint con
    JOIN pg_class c ON c.oid = con.conrelid
    JOIN pg_namespace n ON n.oid = c.relnamespace
    CROSS JOIN LATERAL unnest(con.conkey) WITH ORDINALITY AS k(attnum, ord)
    JOIN pg_attribute a ON a.attrelid = con.conrelid AND a.attnum = k.attnum
    WHERE con.contype IN ('p', 'u')
      AND n.nspname = %s
      AND c.relname = %s
    ORDER BY con.contype, con.conname, k.ord
"""


def resolve_column(row: dict[str, Any]) -> ColumnDescriptor:
    """Build a ColumnDescriptor from one ``_COLUMNS_SQL`` row."""
    is_array = row["type_category"] == "A"
    if is_array:
        base_type = row["element_type"]
        is_enum = row["element_category"] == "E"
    else:
        base_type = row["udt_name"]
        is_enum = row["type_category"] == "E"
    return ColumnDescriptor(
        name=row["column_name"],
        base_type=base_type,
        udt_name=row["udt_name"],
        nullable=not row["not_null"],
        is_array=is_array,
        is_enum=is_enum,
    )


def group_foreign_keys(rows: Iterable[dict[str, Any]]) -> list[ForeignKeyDescriptor]:
    """Group per-column catalog rows into one descriptor per constraint."""
    grouped: dict[str, list[dict[str, Any]]] = {}
    for row in rows:
        grouped.setdefault(row["constraint_name"], []).append(row)

    foreign_keys: list[ForeignKeyDescriptor] = []
    for name, parts in grouped.items():
        parts.sort(key=lambda part: part["position"])
        first = parts[0]
        foreign_keys.append(
            ForeignKeyDescriptor(
                name=name,
                table=first["table_name"],
                columns=tuple(part["column_name"] for part in parts),
                referenced_table=first["foreign_table_name"],
                referenced_columns=tuple(part["foreign_column_name"] for part in parts),
                on_delete=ON_DELETE_ACTIONS.get(first["on_delete"], "NO ACTION"),
            )
        )
    return foreign_keys


def group_key_constraints(rows: Iterable[dict[str, Any]]) -> list[KeyConstraintDescriptor]:
    """Group per-column catalog rows into primary key and unique constraints."""
    grouped: dict[str, list[dict[str, Any]]] = {}
    for row in rows:
        grouped.setdefault(row["constraint_name"], []).append(row)

    keys: list[KeyConstraintDescriptor] = []
    for name, parts in grouped.items():
        parts.sort(key=lambda part: part["position"])
        keys.append(
            KeyConstraintDescriptor(
                name=name,
                columns=tuple(part["column_name"] for part in parts),
                primary=parts[0]["constraint_type"] == "p",
            )
        )
    return keys


class SchemaIntrospector:
    """Reads tables, columns, keys, enums and foreign keys from the PostgreSQL catalog."""

    def __init__(self, pool: DatabasePool, schema: str = "public") -> None:
        self._pool = pool
        self._schema = schema

    def list_tables(self) -> list[str]:
        rows = self._fetch(_TABLES_SQL, (self._schema,))
        return [row["tablename"] for row in rows]

    def list_enums(self) -> list[EnumDescriptor]:
        rows = self._fetch(_ENUMS_SQL, (self._schema,))
        return [
            EnumDescriptor(name=row["enum_name"], labels=tuple(row["enum_values"] or ()))
            for row in rows
        ]

    def get_columns(self, table_name: str) -> list[ColumnDescriptor]:
        rows = self._fetch(_COLUMNS_SQL, (self._schema, table_name))
        return [resolve_column(row) for row in rows]

    def get_foreign_keys(self, table_name: str) -> list[ForeignKeyDescriptor]:
        rows = self._fetch(_FOREIGN_KEYS_SQL, (self._schema, table_name))
        return group_foreign_keys(rows)

    def get_keys(self, table_name: str) -> list[KeyConstraintDescriptor]:
        rows = self._fetch(_KEYS_SQL, (self._schema, table_name))
        return group_key_constraints(rows)

    def describe_table(self, table_name: str) -> TableDescriptor:
        columns = self.get_columns(table_name)
        if not columns:
            raise IntrospectionError(f"Table {table_name} has no columns in schema {self._schema}")
        return TableDescriptor(
            name=table_name,
            columns=tuple(columns),
            keys=tuple(self.get_keys(table_name)),
            foreign_keys=tuple(self.get_foreign_keys(table_name)),
        )

    def introspect(self, table_names: Iterable[str]) -> SchemaSnapshot:
        """Describe *table_names* (order preserved) plus every enum of the schema."""
        snapshot = SchemaSnapshot(enums=self.list_enums())
        for table_name in table_names:
            snapshot.tables[table_name] = self.describe_table(table_name)
        Log.info(
            f"Introspected {len(snapshot.tables)} tables and {len(snapshot.enums)} enum types "
            f"from schema {self._schema}"
        )
        return snapshot

    def _fetch(self, query: str, params: tuple[Any, ...]) -> list[dict[str, Any]]:
        try:
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(query, params)
                    return cur.fetchall()
        except psycopg.Error as exc:
            raise IntrospectionError(f"Catalog query failed: {exc}") from exc
