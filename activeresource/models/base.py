"""
ActiveResource Model Base — metaclass-driven remote resource models.

Usage:
    from activeresource.models import Model

    class User(Model):
        class Meta:
            api_url = "https://api.example.com/v1"
            resource_name = "users"
            collection_envelope = "items"
            pagination_envelope = "_meta"
            attributes = ("id", "email", "status")

    users = User.objects.where(status="active").limit(20).all()
    user = User.find(42)
    user.email = "new@example.com"
    user.save()
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, TYPE_CHECKING

from ..config import QueryConfig
from ..http import HttpClient
from ..unserializers import UnserializerRegistry
from ..utils.urls import trailing_slash
from .manager import Manager
from .options import Options
from .query import Query

logger = logging.getLogger("activeresource.models")

__all__ = ["Model", "ModelMeta"]


class ModelMeta(type):
    """
    Metaclass for resource models.

    Handles:
    - Meta class parsing (inherited from parent models)
    - Default manager attachment
    """

    def __new__(
        mcs,
        name: str,
        bases: Tuple[type, ...],
        namespace: Dict[str, Any],
        **kwargs,
    ) -> ModelMeta:
        # Don't process the base Model class itself
        parents = [b for b in bases if isinstance(b, ModelMeta)]
        if not parents:
            return super().__new__(mcs, name, bases, namespace)

        meta_class = namespace.pop("Meta", None)
        parent_opts = next(
            (getattr(p, "_meta") for p in parents if "_meta" in p.__dict__),
            None,
        )

        cls = super().__new__(mcs, name, bases, namespace)
        cls._meta = Options(name, meta_class, parent_opts)

        if "objects" not in namespace:
            manager = Manager()
            manager.__set_name__(cls, "objects")
            cls.objects = manager

        return cls


class Model(metaclass=ModelMeta):
    """
    Remote resource model — an attribute bag with identity and field errors.

    Attributes are read and written by name (``user.email``). The primary
    key attribute is copied into ``id`` whenever a model is populated from
    an API response.

    ``id`` is the identity set by ``set_id()``, not the attribute named
    "id": ``User(id=5).id`` is ``None`` until the model is populated or
    ``set_id()`` is called. Read the attribute with ``get_attribute("id")``
    and the effective key with ``get_primary_key()``.

    API:
        users = User.objects.where(status="active").all()
        user = User.find(1)
        user.save()            # POST when new, PUT otherwise
        user.delete()          # True iff the API answered 204
        total = User.objects.count()
    """

    _meta: ClassVar[Options]
    objects: ClassVar[Manager]
    _config: ClassVar[Optional[QueryConfig]] = None
    _http_client: ClassVar[Optional[HttpClient]] = None
    _unserializers: ClassVar[Optional[UnserializerRegistry]] = None

    def __init__(self, **attributes: Any):
        self._attributes: Dict[str, Any] = {name: None for name in self._meta.attributes}
        self._attributes.update(attributes)
        self._errors: Dict[str, List[str]] = {}
        self._id: Any = None

    # ── Attribute access ─────────────────────────────────────────────

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        attributes = self.__dict__.get("_attributes", {})
        if name in attributes:
            return attributes[name]
        raise AttributeError(
            f"'{self.__class__.__name__}' object has no attribute '{name}'"
        )

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or isinstance(getattr(type(self), name, None), property):
            object.__setattr__(self, name, value)
        else:
            self._attributes[name] = value

    def get_attributes(self) -> Dict[str, Any]:
        return dict(self._attributes)

    def set_attributes(self, attributes: Mapping[str, Any]) -> Model:
        self._attributes.update(attributes)
        return self

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def set_attribute(self, name: str, value: Any) -> Model:
        self._attributes[name] = value
        return self

    # ── Identity ─────────────────────────────────────────────────────

    @property
    def id(self) -> Any:
        return self._id

    def set_id(self, value: Any) -> Model:
        self._id = value
        return self

    @classmethod
    def primary_key(cls) -> str:
        return cls._meta.primary_key

    def get_primary_key(self) -> Any:
        value = self._attributes.get(self._meta.primary_key)
        return value if value is not None else self._id

    @property
    def is_new_record(self) -> bool:
        return self.get_primary_key() is None

    # ── Validation errors ────────────────────────────────────────────

    def add_error(self, field: str, message: str) -> Model:
        self._errors.setdefault(field, []).append(message)
        return self

    def get_errors(self, field: Optional[str] = None) -> Any:
        """All errors as ``{field: [messages]}``, or the messages of one field."""
        if field is not None:
            return list(self._errors.get(field, []))
        return {name: list(messages) for name, messages in self._errors.items()}

    def has_errors(self, field: Optional[str] = None) -> bool:
        if field is not None:
            return bool(self._errors.get(field))
        return bool(self._errors)

    def clear_errors(self) -> None:
        self._errors = {}

    # ── Query wiring ─────────────────────────────────────────────────

    @classmethod
    def instantiate(cls) -> Model:
        """Empty instance used when populating from responses."""
        return cls()

    @classmethod
    def use_config(cls, config: Optional[QueryConfig]) -> None:
        """Set the class config; the lazily created client is rebuilt from it."""
        cls._config = config
        cls.close_client()

    @classmethod
    def use_client(cls, client: Optional[HttpClient]) -> None:
        cls._http_client = client

    @classmethod
    def use_unserializers(cls, registry: Optional[UnserializerRegistry]) -> None:
        cls._unserializers = registry

    @classmethod
    def _get_client(cls) -> HttpClient:
        """Injected client, else one lazily created client per model class."""
        if cls._http_client is not None:
            return cls._http_client
        client = cls.__dict__.get("_default_client")
        if client is None:
            config = cls._config or QueryConfig()
            client = HttpClient(
                trailing_slash(cls._meta.api_url or ""),
                headers=config.get_request_headers(),
                timeout=config.timeout,
                **config.http_client_extra_config,
            )
            cls._default_client = client
        return client

    @classmethod
    def close_client(cls) -> None:
        """Close the lazily created client of this class, if any."""
        client = cls.__dict__.get("_default_client")
        if client is not None:
            client.close()
            del cls._default_client

    @classmethod
    def query(cls) -> Query:
        """Fresh query bound to this model."""
        if not cls._meta.api_url:
            # Let Query report the missing api_url before a client is built
            return Query(cls)
        return Query(
            cls,
            config=cls._config,
            http_client=cls._get_client(),
            unserializers=cls._unserializers,
        )

    # ── ActiveRecord API ─────────────────────────────────────────────

    @classmethod
    def find(cls, element_id: Any) -> Optional[Model]:
        return cls.query().one(element_id)

    @classmethod
    def find_all(cls, **conditions: Any) -> List[Model]:
        return cls.query().where(conditions).all()

    def save(self) -> bool:
        """
        POST a new record or PUT an existing one.

        Attributes returned by the API are merged back into this instance.
        Returns False when the API reported a validation error for this call.
        """
        self.clear_errors()
        query = self.query()
        result = query.create(self) if self.is_new_record else query.update(self)
        if result is not None and result is not self:
            self.set_attributes(result.get_attributes())
            self.set_id(result.id)
        return not self.has_errors()

    def delete(self) -> bool:
        return self.query().delete(self)

    # ── Serialization ────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return self.get_attributes()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self._id!r}>"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, self.__class__):
            return False
        pk = self.get_primary_key()
        return pk is not None and pk == other.get_primary_key()

    def __hash__(self) -> int:
        return hash((self.__class__.__name__, self.get_primary_key()))
