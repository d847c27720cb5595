"""Shared utilities: logging, header normalization and cell parsers."""
