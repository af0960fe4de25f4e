"""
Config Adapters - Configuration providers and macro expansion.
"""

from .environment import EnvironmentConfigProvider
from .macros import expand

__all__ = [
    "EnvironmentConfigProvider",
    "expand",
]
