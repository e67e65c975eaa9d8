"""
Domain Layer - Core business types and services for expense tracking.

This module contains:
- money: Money value type and arithmetic
- entities/: Immutable domain objects (CostEntry) and enums
- services/: Split calculator, cost ledger, budget aggregator, projects
"""

from .money import Money
from .entities import CostEntry, CostStatus, SplitMode, MemberRole

__all__ = [
    'Money',
    'CostEntry', 'CostStatus', 'SplitMode', 'MemberRole',
]
