"""
Pacchetto per le API JSON del data layer.

Contiene:
- api_entities_bp  -> CRUD generico per collezione (/api/<kind>/)
- api_rents_bp     -> scadenze: ritardi, virtuali, calendario, pagamento
- api_leases_bp    -> chiusura contratto, regolarizzazione spese
- api_tenants_bp   -> stato candidatura, audit, allegati
- api_documents_bp -> download e entità collegata
- api_settings_bp  -> impostazioni salvate nello store
- api_transfer_bp  -> export / import / svuotamento
- api_schema_bp    -> diagnostica e migrazioni
"""

from .api_entities import api_entities_bp
from .api_rents import api_rents_bp
from .api_leases import api_leases_bp
from .api_tenants import api_tenants_bp
from .api_documents import api_documents_bp
from .api_settings import api_settings_bp
from .api_transfer import api_transfer_bp
from .api_schema import api_schema_bp

__all__ = [
    "api_entities_bp",
    "api_rents_bp",
    "api_leases_bp",
    "api_tenants_bp",
    "api_documents_bp",
    "api_settings_bp",
    "api_transfer_bp",
    "api_schema_bp",
]
