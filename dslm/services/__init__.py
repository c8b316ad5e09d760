"""
Service layer for dslm.

Contains the logic that works on the filesystem:
- Repository: Repository validation and version catalogs
- SwitchService: Core, distribution and profile switching

Services are the primary API for commands to use.
"""

from .repository_service import Repository
from .switch_service import SwitchService

__all__ = [
    'Repository',
    'SwitchService',
]
