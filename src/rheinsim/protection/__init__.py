from .base import FloodProtection, ProtectionState
from .dike import RaiseDike
from .retention import AddRetentionBasin

__all__ = [
    "AddRetentionBasin",
    "FloodProtection",
    "ProtectionState",
    "RaiseDike",
]
