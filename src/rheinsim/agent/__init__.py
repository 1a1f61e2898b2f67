from .policy import RANKING_METRICS, CostEffectivenessPolicy, NullPolicy, PolicyEvaluator, first_candidate
from .steward import ActionOutcome, Steward

__all__ = [
    "ActionOutcome",
    "CostEffectivenessPolicy",
    "NullPolicy",
    "PolicyEvaluator",
    "RANKING_METRICS",
    "Steward",
    "first_candidate",
]
