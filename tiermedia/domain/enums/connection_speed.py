from __future__ import annotations
from enum import StrEnum

class ConnectionSpeed(StrEnum):
    slow = "slow"
    medium = "medium"
    fast = "fast"
