"""
Domain Services - Business logic for splitting, the cost ledger and reporting.
"""

from .split_calculator import Participant, SplitShare, compute_splits, validate_split_total
from .cost_ledger_service import CostLedgerService
from .project_service import ProjectService
from .allocation_service import AllocationService
from .user_service import UserService
from .report_service import ReportService

__all__ = [
    'Participant',
    'SplitShare',
    'compute_splits',
    'validate_split_total',
    'CostLedgerService',
    'ProjectService',
    'AllocationService',
    'UserService',
    'ReportService',
]
