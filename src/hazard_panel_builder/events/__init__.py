"""Event harmonization and spell truncation."""

from .harmonizer import EventHarmonizer
from .truncation import SpellTruncator

__all__ = ["EventHarmonizer", "SpellTruncator"]
