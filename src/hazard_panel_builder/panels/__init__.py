"""Risk-set assembly and the end-to-end panel builder."""

from .assembler import RiskSetAssembler
from .risk_set import RiskSetPanel

__all__ = ["RiskSetAssembler", "RiskSetPanel"]
