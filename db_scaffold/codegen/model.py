"""In-memory model of the generated types."""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Final, Sequence

from ..dialects import UNKNOWN_TYPE_PREFIX, ColumnMetadata, DialectReader
from ..shared import (
    PYTHON_KEYWORDS,
    ColumnNameWarning,
    UnmappedTypeWarning,
    class_name_for_table,
    module_name_for_class,
)

# Empty/zero value literal for each non-nullable Python type
DEFAULT_VALUES: Final[dict[str, str]] = {
    "int": "0",
    "float": "0.0",
    "bool": "False",
    "str": '""',
    "bytes": 'b""',
    "decimal.Decimal": "decimal.Decimal(0)",
    "datetime.datetime": "datetime.datetime.min",
    "datetime.date": "datetime.date.min",
    "datetime.time": "datetime.time.min",
    "datetime.timedelta": "datetime.timedelta(0)",
    "uuid.UUID": "uuid.UUID(int=0)",
}

# Import lines for types that live outside builtins
TYPE_IMPORTS: Final[dict[str, str]] = {
    "datetime": "import datetime",
    "decimal": "import decimal",
    "uuid": "import uuid",
    "Any": "from typing import Any",
}


def default_value_for(base_type: str, is_nullable: bool) -> str:
    """Return the literal a property of this type starts out with."""
    if is_nullable:
        return "None"
    return DEFAULT_VALUES.get(base_type, "None")


def import_for_type(type_name: str) -> str | None:
    """Return the import line a type annotation depends on, if any."""
    base_type = type_name.replace(" | None", "")
    if "." in base_type:
        return TYPE_IMPORTS.get(base_type.split(".", 1)[0])
    return TYPE_IMPORTS.get(base_type)


@dataclass(slots=True)
class GeneratedProperty:
    """One field of a generated type."""

    name: str
    base_type: str
    is_nullable: bool = False
    read_only: bool = False
    has_default: bool = False

    @property
    def type(self) -> str:
        return f"{self.base_type} | None" if self.is_nullable else self.base_type

    @property
    def default(self) -> str:
        return default_value_for(self.base_type, self.is_nullable)


@dataclass
class GeneratedType:
    """A data-holder type generated for one table."""

    name: str
    table_name: str
    identity_column: str | None = None
    properties: list[GeneratedProperty] = field(default_factory=list)

    def add_property(self, generated_property: GeneratedProperty) -> None:
        self.properties.append(generated_property)

    @property
    def identity_property(self) -> GeneratedProperty | None:
        if self.identity_column is None:
            return None
        return next(
            (p for p in self.properties if p.name == self.identity_column),
            None,
        )

    @property
    def column_names(self) -> list[str]:
        return [p.name for p in self.properties]


@dataclass
class GeneratedFile:
    """A generated module wrapping one type, plus the imports it needs."""

    namespace: str
    generated_type: GeneratedType
    imports: list[str] = field(default_factory=list)

    @property
    def module_name(self) -> str:
        return module_name_for_class(self.generated_type.name)

    def add_import_for_type(self, type_name: str) -> None:
        import_line = import_for_type(type_name)
        if import_line is not None and import_line not in self.imports:
            self.imports.append(import_line)


def build_generated_type(
    dialect: DialectReader,
    table_name: str,
    columns: Sequence[ColumnMetadata],
) -> GeneratedType:
    """Build the structural model for a table from its column metadata.

    Column order is preserved. Columns whose native type has no mapping
    keep an ``UNKNOWN_`` placeholder type and trigger an
    ``UnmappedTypeWarning``; column names that are not Python identifiers
    trigger a ``ColumnNameWarning``.
    """
    generated_type = GeneratedType(
        name=class_name_for_table(table_name),
        table_name=table_name,
        identity_column=next((c.name for c in columns if c.is_identity), None),
    )

    for column in columns:
        # property names stay equal to column names; they are also the :bind names
        if not column.name.isidentifier() or column.name in PYTHON_KEYWORDS:
            warnings.warn(
                f"Column '{table_name}.{column.name}' is not a valid Python identifier; "
                "the generated module will not import",
                ColumnNameWarning,
                stacklevel=2,
            )

        base_type = dialect.map_type(column.native_type)
        if base_type.startswith(UNKNOWN_TYPE_PREFIX):
            warnings.warn(
                f"No type mapping for '{column.native_type}' "
                f"(column '{table_name}.{column.name}'); emitting {base_type}",
                UnmappedTypeWarning,
                stacklevel=2,
            )

        generated_type.add_property(
            GeneratedProperty(
                name=column.name,
                base_type=base_type,
                is_nullable=column.is_nullable,
                read_only=column.is_read_only,
                has_default=column.has_default,
            )
        )

    return generated_type


def build_generated_file(namespace: str, generated_type: GeneratedType) -> GeneratedFile:
    """Wrap a type into a file and record the imports its fields need."""
    generated_file = GeneratedFile(namespace=namespace, generated_type=generated_type)
    for generated_property in generated_type.properties:
        generated_file.add_import_for_type(generated_property.base_type)
    return generated_file
