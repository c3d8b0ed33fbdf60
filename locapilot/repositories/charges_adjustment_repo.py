"""
Repository specifico per ChargesAdjustment.

Univocità (lease_id, year) garantita dall'upsert; nessuna delete esposta.
"""
from typing import Any, Dict, List, Mapping, Optional

from locapilot.errors import ValidationError
from locapilot.models import ChargesAdjustment
from locapilot.models.base import utcnow
from locapilot.repositories.base import SqlAlchemyRepository

# Valori dei totali non forniti alla creazione o passati a None
ZERO_DEFAULTS: Dict[str, Any] = {
    "monthly_rent": 0,
    "annual_charges": 0,
    "charges_provision_paid": 0,
    "rents_paid_count": 0,
    "rents_paid_total": 0,
}


class ChargesAdjustmentRepository(SqlAlchemyRepository[ChargesAdjustment]):
    def __init__(self, session):
        super().__init__(session, ChargesAdjustment)

    def list_by_lease(self, lease_id: int) -> List[ChargesAdjustment]:
        return (
            self.session.query(ChargesAdjustment)
            .filter_by(lease_id=lease_id)
            .order_by(ChargesAdjustment.year.asc())
            .all()
        )

    def get_for_year(self, lease_id: int, year: int) -> Optional[ChargesAdjustment]:
        return (
            self.session.query(ChargesAdjustment)
            .filter_by(lease_id=lease_id, year=year)
            .first()
        )

    def upsert(self, lease_id: int, year: int, fields: Mapping[str, Any]) -> ChargesAdjustment:
        """
        Crea la riga (lease_id, year) se assente, altrimenti la aggiorna.

        I campi scalari forniti sostituiscono quelli esistenti; ``custom_charges``
        viene fuso chiave per chiave (nuove chiavi aggiunte, esistenti
        sovrascritte, le altre preservate).
        """
        values = self._clean(fields)
        values.pop("lease_id", None)
        values.pop("year", None)
        for name, default in ZERO_DEFAULTS.items():
            if name in values and values[name] is None:
                values[name] = default
        custom = values.pop("custom_charges", None)
        if custom is not None and not isinstance(custom, Mapping):
            raise ValidationError("custom_charges deve essere un dizionario etichetta -> importo")

        row = self.get_for_year(lease_id, year)
        now = utcnow()

        if row is None:
            row = ChargesAdjustment(
                lease_id=lease_id,
                year=year,
                **{**ZERO_DEFAULTS, **values},
                custom_charges=dict(custom or {}),
                created_at=now,
                updated_at=now,
            )
            self.session.add(row)
        else:
            for name, value in values.items():
                setattr(row, name, value)
            if custom:
                # Nuovo dict: la colonna JSON non traccia le mutazioni in place
                row.custom_charges = {**(row.custom_charges or {}), **custom}
            row.updated_at = now

        self.session.flush()
        return row

    def delete(self, id: int) -> None:
        raise ValidationError("Le regolarizzazioni spese non sono cancellabili")
