from dataclasses import dataclass, field

STRING_TYPES = frozenset({"varchar", "bpchar", "text", "char", "name"})
JSON_TYPES = frozenset({"json", "jsonb"})


@dataclass(frozen=True)
class ColumnDescriptor:
    """A column as resolved from the catalog.

    ``base_type`` is the scalar type name (the element type for arrays, the
    enum type name for enum columns).
    """

    name: str
    base_type: str
    udt_name: str
    nullable: bool = True
    is_array: bool = False
    is_enum: bool = False

    @property
    def category(self) -> str:
        """Semantic category: "enum", "string", "json" or the base type name."""
        if self.is_enum:
            return "enum"
        if self.base_type in STRING_TYPES:
            return "string"
        if self.base_type in JSON_TYPES:
            return "json"
        return self.base_type

    @property
    def is_uuid(self) -> bool:
        return self.base_type == "uuid" and not self.is_array

    @property
    def is_json(self) -> bool:
        return self.base_type in JSON_TYPES and not self.is_array


@dataclass(frozen=True)
class ForeignKeyDescriptor:
    """A (possibly multi-column) foreign key, columns in declaration order."""

    name: str
    table: str
    columns: tuple[str, ...]
    referenced_table: str
    referenced_columns: tuple[str, ...]
    on_delete: str = "NO ACTION"


@dataclass(frozen=True)
class KeyConstraintDescriptor:
    """A primary key or unique constraint, columns in declaration order."""

    name: str
    columns: tuple[str, ...]
    primary: bool = False


@dataclass(frozen=True)
class TableDescriptor:
    """Represents one user table of the source schema."""

    name: str
    columns: tuple[ColumnDescriptor, ...]
    foreign_keys: tuple[ForeignKeyDescriptor, ...] = ()
    keys: tuple[KeyConstraintDescriptor, ...] = ()

    @property
    def uuid_columns(self) -> list[str]:
        return [column.name for column in self.columns if column.is_uuid]

    @property
    def json_columns(self) -> frozenset[str]:
        return frozenset(column.name for column in self.columns if column.is_json)

    def has_column(self, name: str) -> bool:
        return any(column.name == name for column in self.columns)


@dataclass(frozen=True)
class EnumDescriptor:
    """An enum type with its labels in sort order."""

    name: str
    labels: tuple[str, ...]


@dataclass
class SchemaSnapshot:
    """Everything needed to recreate the source schema in the sandbox."""

    tables: dict[str, TableDescriptor] = field(default_factory=dict)
    enums: list[EnumDescriptor] = field(default_factory=list)
