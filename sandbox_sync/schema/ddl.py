"""SQL builders for the sandbox schema and data copy.

All identifiers go through ``psycopg.sql`` so reserved names such as
``user`` are quoted.
"""

from collections.abc import Sequence

from psycopg import sql

from sandbox_sync.database.models import (
    ColumnDescriptor,
    EnumDescriptor,
    ForeignKeyDescriptor,
    KeyConstraintDescriptor,
    TableDescriptor,
)

# Catalog type name -> type rendered in CREATE TABLE.
TYPE_ALIASES: dict[str, str] = {
    "varchar": "VARCHAR",
    "bpchar": "VARCHAR",
    "char": "VARCHAR",
    "text": "TEXT",
    "int2": "SMALLINT",
    "int4": "INTEGER",
    "int8": "BIGINT",
    "float4": "REAL",
    "float8": "DOUBLE PRECISION",
    "numeric": "NUMERIC",
    "bool": "BOOLEAN",
    "date": "DATE",
    "time": "TIME",
    "timestamp": "TIMESTAMP",
    "timestamptz": "TIMESTAMPTZ",
    "interval": "INTERVAL",
    "json": "JSON",
    "jsonb": "JSONB",
    "uuid": "UUID",
    "bytea": "BYTEA",
}

FOREIGN_KEY_ACTIONS = frozenset({"NO ACTION", "RESTRICT", "CASCADE", "SET NULL", "SET DEFAULT"})


def column_type(column: ColumnDescriptor) -> sql.Composable:
    """Type for CREATE TABLE; arrays of any string type become TEXT[]."""
    category = column.category
    if category == "enum":
        base: sql.Composable = sql.Identifier(column.base_type)
    elif column.is_array and category == "string":
        base = sql.SQL("TEXT")
    elif column.base_type in TYPE_ALIASES:
        base = sql.SQL(TYPE_ALIASES[column.base_type])
    else:
        base = sql.Identifier(column.base_type)
    if column.is_array:
        return sql.Composed([base, sql.SQL("[]")])
    return base


def column_definition(column: ColumnDescriptor) -> sql.Composed:
    definition = sql.SQL("{} {}").format(sql.Identifier(column.name), column_type(column))
    if not column.nullable:
        definition = sql.Composed([definition, sql.SQL(" NOT NULL")])
    return definition


def drop_type(name: str) -> sql.Composed:
    return sql.SQL("DROP TYPE IF EXISTS {} CASCADE").format(sql.Identifier(name))


def create_enum(enum: EnumDescriptor) -> sql.Composed:
    return sql.SQL("CREATE TYPE {} AS ENUM ({})").format(
        sql.Identifier(enum.name),
        sql.SQL(", ").join(sql.Literal(label) for label in enum.labels),
    )


def drop_table(name: str) -> sql.Composed:
    return sql.SQL("DROP TABLE IF EXISTS {} CASCADE").format(sql.Identifier(name))


def key_constraint(key: KeyConstraintDescriptor) -> sql.Composed:
    kind = sql.SQL("PRIMARY KEY" if key.primary else "UNIQUE")
    return sql.SQL("CONSTRAINT {} {} ({})").format(
        sql.Identifier(key.name),
        kind,
        sql.SQL(", ").join(sql.Identifier(name) for name in key.columns),
    )


def create_table(table: TableDescriptor) -> sql.Composed:
    """Column definitions followed by the primary key and unique constraints."""
    elements = [column_definition(column) for column in table.columns]
    elements.extend(key_constraint(key) for key in table.keys)
    return sql.SQL("CREATE TABLE {} ({})").format(
        sql.Identifier(table.name),
        sql.SQL(", ").join(elements),
    )


def add_foreign_key(fk: ForeignKeyDescriptor) -> sql.Composed:
    statement = sql.SQL("ALTER TABLE {} ADD CONSTRAINT {} FOREIGN KEY ({}) REFERENCES {} ({})").format(
        sql.Identifier(fk.table),
        sql.Identifier(fk.name),
        sql.SQL(", ").join(sql.Identifier(name) for name in fk.columns),
        sql.Identifier(fk.referenced_table),
        sql.SQL(", ").join(sql.Identifier(name) for name in fk.referenced_columns),
    )
    if fk.on_delete != "NO ACTION" and fk.on_delete in FOREIGN_KEY_ACTIONS:
        statement = sql.Composed([statement, sql.SQL(" ON DELETE " + fk.on_delete)])
    return statement


def select_all(name: str, schema: str | None = None) -> sql.Composed:
    table = sql.Identifier(schema, name) if schema else sql.Identifier(name)
    return sql.SQL("SELECT * FROM {}").format(table)


def truncate_table(name: str) -> sql.Composed:
    return sql.SQL("TRUNCATE TABLE {} CASCADE").format(sql.Identifier(name))


def insert_rows(name: str, columns: Sequence[str], row_count: int) -> sql.Composed:
    """Multi-row INSERT with ``row_count`` groups of positional placeholders."""
    row_placeholders = sql.SQL("({})").format(
        sql.SQL(", ").join(sql.Placeholder() for _ in columns)
    )
    return sql.SQL("INSERT INTO {} ({}) VALUES {}").format(
        sql.Identifier(name),
        sql.SQL(", ").join(sql.Identifier(column) for column in columns),
        sql.SQL(", ").join(row_placeholders for _ in range(row_count)),
    )
