"""
Exception hierarchy for the department schema registry.

These errors indicate configuration defects in the schema definitions and are
raised while definitions are loaded or composed into a catalog. They are never
produced per row during an import: resolution and validation outcomes are
returned as values by the resolver and validator modules.
"""

from typing import Optional


def _with_context(message: str, **context: Optional[str]) -> str:
    parts = [f"{key}='{value}'" for key, value in context.items() if value]
    if parts:
        return f"{message} ({', '.join(parts)})"
    return message


class SchemaRegistryError(Exception):
    """Base exception for all schema registry errors."""

    pass


class SchemaDefinitionError(SchemaRegistryError):
    """
    Raised when a schema definition breaks a structural invariant.

    Args:
        message: Error description
        department_id: Department being defined (optional)
        table_id: Table being defined (optional)
        column_id: Column being defined (optional)
    """

    def __init__(
        self,
        message: str,
        department_id: Optional[str] = None,
        table_id: Optional[str] = None,
        column_id: Optional[str] = None,
    ):
        self.message = message
        self.department_id = department_id
        self.table_id = table_id
        self.column_id = column_id
        super().__init__(
            _with_context(
                message,
                department=department_id,
                table=table_id,
                column=column_id,
            )
        )


class NotFoundError(SchemaRegistryError, KeyError):
    """
    Raised when a department or table id is unknown.

    Subclasses ``KeyError`` so lookups behave like the registry mapping they
    wrap, but overrides ``__str__`` to keep the message readable.
    """

    def __init__(
        self,
        message: str,
        department_id: Optional[str] = None,
        table_id: Optional[str] = None,
    ):
        self.department_id = department_id
        self.table_id = table_id
        self.message = _with_context(message, department=department_id, table=table_id)
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class DanglingLinkError(SchemaRegistryError):
    """
    Raised when a linked table cannot be resolved against its owner.

    Args:
        message: Error description
        table_id: Linked table id
        linked_department_id: Department expected to own the table
        linked_table_id: Table id expected in the owning department
    """

    def __init__(
        self,
        message: str,
        table_id: Optional[str] = None,
        linked_department_id: Optional[str] = None,
        linked_table_id: Optional[str] = None,
    ):
        self.table_id = table_id
        self.linked_department_id = linked_department_id
        self.linked_table_id = linked_table_id
        super().__init__(
            _with_context(
                message,
                table=table_id,
                owner=linked_department_id,
                owner_table=linked_table_id,
            )
        )


class ReadOnlyTableError(SchemaRegistryError):
    """Raised when an import batch targets a linked (read-only) table."""

    def __init__(self, table_id: str, linked_department_id: Optional[str] = None):
        self.table_id = table_id
        self.linked_department_id = linked_department_id
        super().__init__(
            _with_context(
                "Linked tables are read-only; validate against the owning schema",
                table=table_id,
                owner=linked_department_id,
            )
        )


class DefinitionsLoadError(SchemaRegistryError):
    """Raised when a schema definitions file cannot be read or parsed."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(_with_context(message, path=path))


__all__ = [
    "SchemaRegistryError",
    "SchemaDefinitionError",
    "NotFoundError",
    "DanglingLinkError",
    "ReadOnlyTableError",
    "DefinitionsLoadError",
]
