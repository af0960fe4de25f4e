"""
Core module - Pure domain logic with no external dependencies.

This module contains:
- domain/: Entities, value types and domain events
- ports/: Abstract interfaces that adapters must implement, with their errors
"""

from .domain import *
from .ports import *
