from unittest.mock import MagicMock

from sandbox_sync.database.models import ColumnDescriptor


def col(
    name: str,
    base_type: str = "text",
    nullable: bool = True,
    is_array: bool = False,
    is_enum: bool = False,
) -> ColumnDescriptor:
    """Shorthand ColumnDescriptor factory."""
    udt_name = f"_{base_type}" if is_array else base_type
    return ColumnDescriptor(
        name=name,
        base_type=base_type,
        udt_name=udt_name,
        nullable=nullable,
        is_array=is_array,
        is_enum=is_enum,
    )


def mock_pool() -> tuple[MagicMock, MagicMock]:
    """A DatabasePool stand-in; returns (pool, connection)."""
    mock_conn = MagicMock()
    pool = MagicMock()
    pool.connection.return_value.__enter__ = MagicMock(return_value=mock_conn)
    pool.connection.return_value.__exit__ = MagicMock(return_value=False)
    return pool, mock_conn
