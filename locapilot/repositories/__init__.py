"""
Package repositories.
Espone i Repository per l'accesso ai dati.
"""

from .base import SqlAlchemyRepository
from .property_repo import PropertyRepository
from .tenant_repo import TenantRepository
from .lease_repo import LeaseRepository
from .rent_repo import RentRepository
from .document_repo import DocumentRepository
from .inventory_repo import InventoryRepository
from .communication_repo import CommunicationRepository
from .tenant_document_repo import TenantDocumentRepository
from .tenant_audit_repo import TenantAuditRepository
from .settings_repo import SettingsRepository
from .charges_adjustment_repo import ChargesAdjustmentRepository
from .transfer_repo import BUSINESS_TABLES, DataTransferRepository

__all__ = [
    "SqlAlchemyRepository",
    "PropertyRepository",
    "TenantRepository",
    "LeaseRepository",
    "RentRepository",
    "DocumentRepository",
    "InventoryRepository",
    "CommunicationRepository",
    "TenantDocumentRepository",
    "TenantAuditRepository",
    "SettingsRepository",
    "ChargesAdjustmentRepository",
    "BUSINESS_TABLES",
    "DataTransferRepository",
]
