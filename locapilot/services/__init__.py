"""
Pacchetto per i servizi (logica di business) del data layer.

I servizi orchestrano:
- repository (accesso allo store) tramite UnitOfWork
- calcoli sullo stato derivato delle scadenze (rent_lifecycle)
- export / svuotamento / import dei dati
- logging strutturato
"""

from .transfer_service import clear_all, export_json, export_snapshot, import_snapshot
from .rent_service import (
    get_calendar,
    list_overdue_rents,
    list_virtual_rents,
    mark_rent_paid,
    materialize_virtual_rent,
    refresh_overdue_rents,
)
from .charges_service import list_charges_adjustments, upsert_charges_adjustment
from .lease_service import terminate_lease
from .tenant_service import (
    add_tenant_document,
    change_tenant_status,
    fetch_last_refusal_reason,
    remove_tenant_document,
    update_tenant,
)
from .settings_service import get_setting, set_setting
