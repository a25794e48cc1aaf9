"""Tabular read/write utilities."""

from .export import read_panel, to_csv, to_parquet, to_stata

__all__ = ["read_panel", "to_parquet", "to_csv", "to_stata"]
