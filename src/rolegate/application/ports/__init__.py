"""Application ports - interfaces for external adapters."""

from rolegate.application.ports.cache_coherency import CacheCoherency
from rolegate.application.ports.permission_checker import PermissionChecker
from rolegate.application.ports.role_reader import RoleReader
from rolegate.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "CacheCoherency",
    "PermissionChecker",
    "RoleReader",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
