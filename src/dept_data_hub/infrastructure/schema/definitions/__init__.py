"""Packaged department schema definitions (one ``<department>.yml`` per department)."""

from pathlib import Path

DEFINITIONS_DIR = Path(__file__).resolve().parent

__all__ = ["DEFINITIONS_DIR"]
