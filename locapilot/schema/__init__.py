"""
Gestione delle versioni di schema dello store locale.
"""

from .manager import MigrationManager
from .versions import MIGRATIONS, Migration, validate_migration_order

__all__ = [
    "MigrationManager",
    "MIGRATIONS",
    "Migration",
    "validate_migration_order",
]
