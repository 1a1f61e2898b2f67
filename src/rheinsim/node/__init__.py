from .base import BaseNode
from .history import RollingHistory
from .protocols import Consumes, Discharges
from .segment import MAX_RETENTION_OFFERS, Segment
from .source import Source
from .strategies import THREAT_RULES, MovingAverageThreat, PeakInflowThreat, ThreatRule, threat_rule

__all__ = [
    # Protocols
    "Consumes",
    "Discharges",
    # Threat rules
    "MovingAverageThreat",
    "PeakInflowThreat",
    "THREAT_RULES",
    "ThreatRule",
    "threat_rule",
    # Nodes
    "BaseNode",
    "MAX_RETENTION_OFFERS",
    "RollingHistory",
    "Segment",
    "Source",
]
