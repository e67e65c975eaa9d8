"""
Repository implementations for data access layer.
"""
from .base_repository import BaseRepository
from .user_repository import UserRepository, normalize_email
from .project_repository import ProjectRepository
from .cost_repository import CostRepository
from .allocation_repository import AllocationRepository

__all__ = [
    'BaseRepository',
    'UserRepository',
    'normalize_email',
    'ProjectRepository',
    'CostRepository',
    'AllocationRepository',
]
