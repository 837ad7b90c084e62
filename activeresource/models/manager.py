"""
ActiveResource Model Manager — descriptor-based Query access.

Every model gets a default Manager as ``objects``:

    class User(Model):
        class Meta:
            api_url = "https://api.example.com/v1"

    users = User.objects.where(status="active").all()
    total = User.objects.count()

Each call starts a fresh Query, so filters never leak between chains.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Type, TYPE_CHECKING

if TYPE_CHECKING:
    from .base import Model
    from .outcome import Outcome
    from .query import Query


__all__ = ["Manager"]


class Manager:
    """
    Minimal manager with descriptor protocol.

    Subclass and override ``get_queryset()`` for pre-filtered managers:

        class ActiveManager(Manager):
            def get_queryset(self):
                return super().get_queryset().where(status="active")
    """

    _model_cls: Optional[Type[Model]] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self._model_cls = owner  # type: ignore

    def __get__(self, instance: Any, owner: type) -> Manager:
        # Ensure model class is always current (supports inheritance)
        self._model_cls = owner  # type: ignore
        if instance is not None:
            raise AttributeError(
                "Manager is accessible only via the model class, not instances."
            )
        return self

    def get_queryset(self) -> Query:
        """Return a fresh Query for the model."""
        if self._model_cls is None:
            raise RuntimeError("Manager is not bound to a model")
        return self._model_cls.query()

    # ── Forwarded builder methods ────────────────────────────────────

    def select(self, fields: Iterable[str] | str) -> Query:
        return self.get_queryset().select(fields)

    def where(self, conditions: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Query:
        return self.get_queryset().where(conditions, **kwargs)

    def limit(self, n: Optional[int]) -> Query:
        return self.get_queryset().limit(n)

    def offset(self, n: Optional[int]) -> Query:
        return self.get_queryset().offset(n)

    # ── Forwarded terminal methods ───────────────────────────────────

    def all(self) -> List[Model]:
        return self.get_queryset().all()

    def one(self, element_id: Any) -> Optional[Model]:
        return self.get_queryset().one(element_id)

    def create(self, model: Model) -> Model:
        return self.get_queryset().create(model)

    def update(self, model: Model) -> Model:
        return self.get_queryset().update(model)

    def delete(self, model: Model) -> bool:
        return self.get_queryset().delete(model)

    def count(self) -> int:
        return self.get_queryset().count()

    def exists(self) -> bool:
        return self.get_queryset().exists()

    def try_all(self) -> Outcome:
        return self.get_queryset().try_all()

    def try_one(self, element_id: Any) -> Outcome:
        return self.get_queryset().try_one(element_id)

    def try_create(self, model: Model) -> Outcome:
        return self.get_queryset().try_create(model)

    def try_update(self, model: Model) -> Outcome:
        return self.get_queryset().try_update(model)

    def __repr__(self) -> str:
        name = self._model_cls.__name__ if self._model_cls else "unbound"
        return f"<Manager {name}>"
