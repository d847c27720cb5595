"""
Infrastructure Layer

Components:
- schema: Department schema model, YAML definitions and the schema catalog
- resolution: Header-to-column resolution for import files
- validation: Typed value validation and batch reporting

Usage:
    from dept_data_hub.infrastructure.schema import get_table
    from dept_data_hub.infrastructure.resolution import resolve_column
    from dept_data_hub.infrastructure.validation import validate_value
"""

__all__: list[str] = []
