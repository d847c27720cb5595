"""Command-line interface for DeptDataHub."""
