"""
Perforce Adapter - Implementation of ChangeSourcePort for Perforce.
"""

from .adapter import PerforceAdapter
from .client import P4Client

__all__ = [
    "PerforceAdapter",
    "P4Client",
]
