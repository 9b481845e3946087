class SchemaError(Exception):
    """Base exception for schema introspection and replication."""


class IntrospectionError(SchemaError):
    """Raised when the source catalog cannot be read."""


class SchemaReplicationError(SchemaError):
    """Raised when an enum or table cannot be created in the sandbox."""
