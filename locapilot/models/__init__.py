"""
Pacchetto per i modelli SQLAlchemy.

Qui vengono esportate le classi modello principali.
Nota: i modelli non dichiarano indici, che sono gestiti dalle versioni di
schema in ``locapilot.schema``.
"""

from .property import Property
from .tenant import Tenant
from .lease import Lease
from .rent import Rent
from .document import Document, RelatedEntityKind
from .inventory import Inventory
from .communication import Communication
from .tenant_document import TenantDocument
from .tenant_audit import TenantAudit
from .app_setting import AppSetting
from .charges_adjustment import ChargesAdjustment
from .schema_migration import SchemaMigration

__all__ = [
    "Property",
    "Tenant",
    "Lease",
    "Rent",
    "Document",
    "RelatedEntityKind",
    "Inventory",
    "Communication",
    "TenantDocument",
    "TenantAudit",
    "AppSetting",
    "ChargesAdjustment",
    "SchemaMigration",
]
