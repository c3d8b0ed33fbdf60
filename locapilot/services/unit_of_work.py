"""
Unit of Work Pattern.
Gestisce la transazione del database atomica e l'accesso ai repository.

La sessione viene iniettata (default: la sessione di Flask-SQLAlchemy) e
passata a ogni repository alla costruzione: nessun repository accede allo
store per conto proprio.
"""
from typing import Dict, Optional

from locapilot.errors import ValidationError
from locapilot.extensions import db

# Import Repositories
from locapilot.repositories import (
    ChargesAdjustmentRepository,
    CommunicationRepository,
    DataTransferRepository,
    DocumentRepository,
    InventoryRepository,
    LeaseRepository,
    PropertyRepository,
    RentRepository,
    SettingsRepository,
    TenantAuditRepository,
    TenantDocumentRepository,
    TenantRepository,
)

# Nome tabella/collezione -> attributo della UoW (CRUD generico)
ENTITY_REPOSITORIES = {
    "properties": "properties",
    "tenants": "tenants",
    "leases": "leases",
    "rents": "rents",
    "documents": "documents",
    "inventories": "inventories",
    "communications": "communications",
}


class UnitOfWork:
    def __init__(self, session=None):
        self.session = session if session is not None else db.session
        self._repositories: Dict[str, object] = {}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.rollback()
            return False
        # Flask gestisce la chiusura della sessione, non chiudere qui

    def _get(self, name: str, repo_cls):
        repo = self._repositories.get(name)
        if repo is None:
            repo = repo_cls(self.session)
            self._repositories[name] = repo
        return repo

    @property
    def properties(self) -> PropertyRepository:
        return self._get("properties", PropertyRepository)

    @property
    def tenants(self) -> TenantRepository:
        return self._get("tenants", TenantRepository)

    @property
    def leases(self) -> LeaseRepository:
        return self._get("leases", LeaseRepository)

    @property
    def rents(self) -> RentRepository:
        return self._get("rents", RentRepository)

    @property
    def documents(self) -> DocumentRepository:
        return self._get("documents", DocumentRepository)

    @property
    def inventories(self) -> InventoryRepository:
        return self._get("inventories", InventoryRepository)

    @property
    def communications(self) -> CommunicationRepository:
        return self._get("communications", CommunicationRepository)

    @property
    def tenant_documents(self) -> TenantDocumentRepository:
        return self._get("tenant_documents", TenantDocumentRepository)

    @property
    def tenant_audits(self) -> TenantAuditRepository:
        return self._get("tenant_audits", TenantAuditRepository)

    @property
    def settings(self) -> SettingsRepository:
        return self._get("settings", SettingsRepository)

    @property
    def charges_adjustments(self) -> ChargesAdjustmentRepository:
        return self._get("charges_adjustments", ChargesAdjustmentRepository)

    @property
    def transfer(self) -> DataTransferRepository:
        return self._get("transfer", DataTransferRepository)

    def repository(self, kind: str):
        """Repository per nome di collezione (es. 'properties')."""
        attr: Optional[str] = ENTITY_REPOSITORIES.get(kind)
        if attr is None:
            raise ValidationError(f"Collezione sconosciuta: {kind!r}")
        return getattr(self, attr)

    def commit(self):
        try:
            self.session.commit()
        except Exception:
            self.rollback()
            raise

    def rollback(self):
        self.session.rollback()
