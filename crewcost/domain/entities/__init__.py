"""
Domain Entities - Core immutable business objects.
"""

from .cost_entry import CostEntry, CostStatus, SplitMode, MemberRole

__all__ = [
    'CostEntry', 'CostStatus', 'SplitMode', 'MemberRole',
]
