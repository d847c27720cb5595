"""
DeptDataHub - Department schema registry and import engine.

Typed table schemas for every department, header-to-column resolution for
uncontrolled spreadsheet headers, and per-cell value validation for bulk
imports.
"""

__version__ = "0.1.0"
