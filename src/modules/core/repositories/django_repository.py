"""Generic Django ORM repository.

Concrete repositories set ``model`` (and optionally ``select_related``)
and inherit the CRUD surface.  Look-ups follow the Null Object
convention: missing rows and malformed IDs yield ``None`` rather than an
exception, leaving the Service Layer to decide what "not found" means.
Soft-deletable models are always read through ``.alive()``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Sequence, Type

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.core.repositories.interfaces import IRepository, T

logger = structlog.get_logger(__name__)


class DjangoRepository(IRepository[T]):
    """Base repository backed by a single Django model."""

    model: Type[models.Model]
    select_related: Sequence[str] = ()

    @property
    def _entity_name(self) -> str:
        return self.model._meta.model_name

    def _queryset(self) -> models.QuerySet:
        manager = self.model._default_manager
        queryset = manager.alive() if hasattr(manager, "alive") else manager.all()
        if self.select_related:
            queryset = queryset.select_related(*self.select_related)
        return queryset

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: Any) -> Optional[T]:
        """Return the entity with primary key *id* or ``None``."""
        return self.get(pk=id)

    def get(self, **lookups: Any) -> Optional[T]:
        """Return the first entity matching *lookups* or ``None``."""
        try:
            return self._queryset().filter(**lookups).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        queryset = self._queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def exists(self, **lookups: Any) -> bool:
        try:
            return self._queryset().filter(**lookups).exists()
        except (ValueError, ValidationError):
            return False

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""
        is_new = entity._state.adding
        entity.save()
        logger.info(
            f"{self._entity_name}.saved",
            entity_id=str(entity.pk),
            is_new=is_new,
        )
        return entity

    @transaction.atomic
    def delete(self, id: Any) -> bool:
        """Delete by primary key (soft delete for ``SoftDeleteModel``).

        Returns ``False`` when no entity exists with the given ID.
        """
        entity = self.get_by_id(id)
        if not entity:
            return False
        entity.delete()
        logger.info(f"{self._entity_name}.deleted", entity_id=str(id))
        return True

    @transaction.atomic
    def delete_many(self, entities: Iterable[T]) -> int:
        """Delete a batch of entities in one statement."""
        ids = [entity.pk for entity in entities]
        if not ids:
            return 0
        count, _ = self.model._default_manager.filter(pk__in=ids).delete()
        logger.info(f"{self._entity_name}.deleted_many", count=count)
        return count
