"""Pydantic models for catalog metadata and comparison results.

This module contains schema-domain models:
- Catalog models: CatalogObject, ColumnDescriptor
- Comparison models: ObjectDiff, TableDiff, ComparisonResult
- Run options: CompareOptions

Configuration models (DatabaseProfile, DiffConfig) live in
schema_diff.config.models.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DiffMode = Literal["statement", "text"]
ColumnStrategy = Literal["on_demand", "bulk"]

DEFAULT_OBJECT_TYPES: list[str] = ["TABLE", "PACKAGE", "SEQUENCE", "SYNONYM"]
DEFAULT_PATTERN = "^[RT]_"


# ============================================================================
# Catalog Models
# ============================================================================


class CatalogObject(BaseModel):
    """A named, typed catalog entry (table, package, sequence, ...).

    Example:
        >>> obj = CatalogObject(name="T_USERS", type="TABLE")
        >>> obj.key
        ('T_USERS', 'TABLE')
        >>> str(obj)
        'T_USERS TABLE'
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: str

    @property
    def key(self) -> tuple[str, str]:
        """Identity of the object within one catalog."""
        return (self.name, self.type)

    def __str__(self) -> str:
        return f"{self.name} {self.type}"


class ColumnDescriptor(BaseModel):
    """A table column as reported by a catalog.

    ``type_signature`` already carries the `` NOT NULL`` suffix for
    non-nullable columns, so two columns are equal in type exactly when
    their signatures are equal.

    Example:
        >>> col = ColumnDescriptor.from_catalog("local", "T_A", "ID", "NUMBER(10,0)", False)
        >>> col.type_signature
        'NUMBER(10,0) NOT NULL'
        >>> col.render()
        'ID NUMBER(10,0) NOT NULL'
    """

    model_config = ConfigDict(frozen=True)

    table: str
    name: str
    type_signature: str
    nullable: bool = True
    schema_label: str = ""

    @classmethod
    def from_catalog(
        cls,
        schema_label: str,
        table: str,
        name: str,
        data_type: str,
        nullable: bool,
    ) -> "ColumnDescriptor":
        """Build a descriptor from a catalog row's base type and nullability."""
        signature = data_type if nullable else f"{data_type} NOT NULL"
        return cls(
            schema_label=schema_label,
            table=table,
            name=name,
            nullable=nullable,
            type_signature=signature,
        )

    def render(self) -> str:
        """Render as ``"<name> <type_signature>"`` (text-diff mode line body)."""
        return f"{self.name} {self.type_signature}"


# ============================================================================
# Comparison Result Models
# ============================================================================


class TableDiff(BaseModel):
    """Column discrepancies of one table present in both catalogs."""

    model_config = ConfigDict(frozen=True)

    table: str
    diff_text: str


class ObjectDiff(BaseModel):
    """Object-level set difference between two catalogs.

    Both lists keep the order of the catalog they were taken from, which is
    the catalog query's own ``ORDER BY``.
    """

    missing_from_local: list[CatalogObject] = Field(default_factory=list)
    extraneous_in_local: list[CatalogObject] = Field(default_factory=list)
    common_tables: list[str] = Field(default_factory=list)


class ComparisonResult(BaseModel):
    """Result of a complete comparison run.

    Example:
        >>> result = ComparisonResult(objects=ObjectDiff())
        >>> result.has_differences
        False
    """

    objects: ObjectDiff
    table_diffs: list[TableDiff] = Field(default_factory=list)

    @property
    def has_differences(self) -> bool:
        """True if any of the three report sections is non-empty."""
        return bool(
            self.objects.missing_from_local
            or self.objects.extraneous_in_local
            or self.table_diffs
        )


# ============================================================================
# Run Options
# ============================================================================


class CompareOptions(BaseModel):
    """Options consumed by the comparison engine.

    An empty ``pattern`` degrades to ``"."`` (match everything).

    Example:
        >>> CompareOptions(pattern="").effective_pattern
        '.'
    """

    model_config = ConfigDict(frozen=True)

    object_types: list[str] = Field(
        default_factory=lambda: list(DEFAULT_OBJECT_TYPES), min_length=1
    )
    pattern: str = DEFAULT_PATTERN
    mode: DiffMode = "statement"
    column_strategy: ColumnStrategy = "on_demand"
    max_concurrency: int = Field(default=8, ge=1)

    @field_validator("object_types")
    @classmethod
    def _upper_types(cls, value: list[str]) -> list[str]:
        types = [t.strip().upper() for t in value if t.strip()]
        if not types:
            raise ValueError("object_types must name at least one object type")
        return types

    @property
    def effective_pattern(self) -> str:
        return self.pattern or "."
