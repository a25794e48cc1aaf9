"""Risk-window filtering."""

from .filter import TimeWindowFilter

__all__ = ["TimeWindowFilter"]
