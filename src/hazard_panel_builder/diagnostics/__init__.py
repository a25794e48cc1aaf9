"""Diagnostics for panel coverage, covariate missingness and spells."""

from .coverage import CoverageAnalyzer
from .missingness import MissingnessAnalyzer
from .spells import SpellAnalyzer

__all__ = ["CoverageAnalyzer", "MissingnessAnalyzer", "SpellAnalyzer"]
