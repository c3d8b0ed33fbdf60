"""
Generic Repository Pattern.
Fornisce le operazioni CRUD base per qualsiasi modello SQLAlchemy.

La sessione viene passata dal chiamante (la UnitOfWork): il repository non
apre né chiude transazioni e non fa commit.
"""
from typing import Any, Dict, Generic, List, Mapping, Optional, Tuple, Type, TypeVar

from locapilot.errors import NotFoundError, ValidationError
from locapilot.extensions import db
from locapilot.models.base import utcnow

# Definisce un tipo generico T che deve essere un modello SQLAlchemy
T = TypeVar("T", bound=db.Model)

# Campi che il chiamante non può impostare con create/update
PROTECTED_FIELDS = ("id", "created_at", "updated_at")


class SqlAlchemyRepository(Generic[T]):
    # Valori ammessi per i campi enumerati, es. {"status": ("pending", "paid")}
    choices: Mapping[str, Tuple[str, ...]] = {}

    def __init__(self, session, model_cls: Type[T]):
        self.session = session
        self.model_cls = model_cls

    @property
    def entity_name(self) -> str:
        return self.model_cls.__name__

    def add(self, entity: T) -> T:
        """Aggiunge l'entità alla sessione."""
        self.session.add(entity)
        return entity

    def get_by_id(self, id: int) -> Optional[T]:
        """Recupera per Primary Key."""
        if id is None:
            return None
        return self.session.get(self.model_cls, id)

    def get_or_raise(self, id: int) -> T:
        entity = self.get_by_id(id)
        if entity is None:
            raise NotFoundError(self.entity_name, id)
        return entity

    def list_all(self) -> List[T]:
        """Ritorna tutti i record, in ordine di id."""
        return self.session.query(self.model_cls).order_by(self.model_cls.id.asc()).all()

    def count(self) -> int:
        return self.session.query(self.model_cls).count()

    def create(self, data: Mapping[str, Any]) -> T:
        """Crea l'entità da un dizionario, impostando created_at/updated_at."""
        values = self._clean(data)
        self.validate(values, existing=None)
        now = utcnow()
        entity = self.model_cls(**values)
        if hasattr(entity, "created_at"):
            entity.created_at = now
        if hasattr(entity, "updated_at"):
            entity.updated_at = now
        self.session.add(entity)
        self.session.flush()
        return entity

    def update(self, id: int, partial: Mapping[str, Any]) -> T:
        """Aggiorna i campi forniti; imposta solo updated_at."""
        entity = self.get_or_raise(id)
        values = self._clean(partial)
        self.validate(values, existing=entity)
        for name, value in values.items():
            setattr(entity, name, value)
        if hasattr(entity, "updated_at"):
            entity.updated_at = utcnow()
        self.session.flush()
        return entity

    def delete(self, id: int) -> None:
        """Cancella l'entità (NotFoundError se assente)."""
        entity = self.get_or_raise(id)
        self.session.delete(entity)
        self.session.flush()

    def clear(self) -> int:
        """Svuota la tabella; ritorna il numero di righe cancellate."""
        return self.session.query(self.model_cls).delete(synchronize_session=False)

    def validate(self, values: Dict[str, Any], existing: Optional[T]) -> None:
        """Hook per i vincoli applicativi; di default controlla solo i campi enumerati."""
        for field, allowed in self.choices.items():
            if field in values and values[field] not in allowed:
                raise ValidationError(
                    f"Valore {values[field]!r} non ammesso per {self.entity_name}.{field}"
                )

    def _clean(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        if not isinstance(data, Mapping):
            raise ValidationError(f"Dati non validi per {self.entity_name}")
        values = self.model_cls.values_from_dict(data, strict=True)
        for name in PROTECTED_FIELDS:
            values.pop(name, None)
        return values

    def _merged(self, values: Mapping[str, Any], existing: Optional[T], field: str) -> Any:
        """Valore risultante di un campo dopo create/update (per i vincoli incrociati)."""
        if field in values:
            return values[field]
        return getattr(existing, field, None) if existing is not None else None
