"""
ActiveResource Query — chainable builder with HTTP terminals.

Builder methods (select, where, limit, offset) mutate the query and return
the same instance. Terminal methods (all, one, create, update, delete,
count) perform the HTTP request and turn the response into models.

Usage:
    users = User.objects.where({"status": "active"}).select(["id", "email"]).limit(10).all()
    user = User.objects.one(42)
    total = User.objects.where({"role": "admin"}).count()

    created = Query(User).create(User(email="alice@example.com"))
    if created.has_errors():
        print(created.get_errors("email"))
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, TYPE_CHECKING

from ..config import QueryConfig
from ..faults import (
    ConfigMissingFault,
    InvalidCallFault,
    InvalidConditionFault,
    ServerUnreachableFault,
    UnserializeFault,
)
from ..http import HttpClient, Response
from ..unserializers import UnserializerRegistry
from ..utils.urls import resource_path, trailing_slash
from .outcome import HttpFailure, Ok, Outcome, TransportFailure, ValidationFailed

if TYPE_CHECKING:
    from .base import Model

__all__ = ["Query"]

logger = logging.getLogger("activeresource.models.query")

_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*$")


def _is_numeric(value: Any) -> bool:
    """True for ints, finite floats and numeric strings; never for bools."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, str):
        return bool(_NUMERIC_RE.match(value)) and math.isfinite(float(value))
    return False


def _to_int(value: Any) -> int:
    """Truncate a numeric value (see ``_is_numeric``) to int."""
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    return int(float(value))


def _coerce_numeric(value: Any) -> Any:
    return _to_int(value) if _is_numeric(value) else value


def _int_or_zero(value: Any) -> int:
    return _to_int(value) if _is_numeric(value) else 0


class Query:
    """
    Query against one REST resource.

    Resource layout (URLs, envelopes, parameter names) is read once from
    the model's ``Meta`` at construction.

    Chain methods (return self):
        select(fields)           — fields=a,b,c
        where(conditions)        — exact-match query parameters
        limit(n)                 — limit parameter
        offset(n)                — offset parameter

    Terminal methods:
        all()                    — List[Model]
        one(id)                  — Model or None
        create(model)            — Model (or the given model with errors on 422)
        update(model)            — Model (or the given model with errors on 422)
        delete(model)            — bool (True iff 204)
        count()                  — int
        exists()                 — bool

    ``try_all``, ``try_one``, ``try_create`` and ``try_update`` return an
    ``Outcome`` instead of raising.
    """

    __slots__ = (
        "_model_cls",
        "config",
        "http_client",
        "_owns_client",
        "_unserializers",
        "_resource_name",
        "_api_url",
        "_primary_key",
        "_collection_envelope",
        "_pagination_envelope",
        "_pagination_envelope_keys",
        "limit_key",
        "offset_key",
        "_select",
        "_where",
        "_limit",
        "_offset",
        "_pagination",
        "_is_subquery",
    )

    def __init__(
        self,
        model_cls: Type[Model],
        *,
        config: Optional[QueryConfig] = None,
        http_client: Optional[HttpClient] = None,
        unserializers: Optional[UnserializerRegistry] = None,
        _subquery: bool = False,
    ):
        opts = model_cls._meta
        if not opts.api_url:
            raise ConfigMissingFault(
                f"{model_cls.__name__}.Meta.api_url",
                metadata={"model": model_cls.__name__},
            )

        self._model_cls = model_cls
        self.config = config or QueryConfig()
        self._unserializers = unserializers or UnserializerRegistry.default()

        self._api_url = opts.api_url
        self._resource_name = opts.resource_name
        self._primary_key = opts.primary_key
        self._collection_envelope = opts.collection_envelope
        self._pagination_envelope = opts.pagination_envelope
        self._pagination_envelope_keys = dict(opts.pagination_envelope_keys)
        self.limit_key = opts.limit_key
        self.offset_key = opts.offset_key

        self._owns_client = http_client is None
        self.http_client = http_client or HttpClient(
            self.api_base_url(),
            headers=self.config.get_request_headers(),
            timeout=self.config.timeout,
            **self.config.http_client_extra_config,
        )

        self._select: List[str] = []
        self._where: Dict[str, Any] = {}
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None
        self._pagination: Optional[Dict[str, Any]] = None
        self._is_subquery = _subquery

    # ── Chain methods (return self) ──────────────────────────────────

    def select(self, fields: Iterable[str] | str) -> Query:
        """Request only these fields (sent as ``fields=a,b``)."""
        self._select = [fields] if isinstance(fields, str) else list(fields)
        return self

    def where(self, conditions: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Query:
        """
        Replace the filter conditions.

        Values must be scalars; numeric-looking values are sent as ints.

        Usage:
            .where({"status": "active", "age": "30"})
            .where(status="active")
        """
        merged = {**(conditions or {}), **kwargs}
        for key, value in merged.items():
            if isinstance(value, (list, tuple, set, frozenset, dict)):
                raise InvalidConditionFault(key, value)
        self._where = merged
        return self

    def limit(self, n: Optional[int]) -> Query:
        self._limit = self._non_negative("limit", n)
        return self

    def offset(self, n: Optional[int]) -> Query:
        self._offset = self._non_negative("offset", n)
        return self

    @staticmethod
    def _non_negative(method: str, n: Any) -> Optional[int]:
        if n is None:
            return None
        value = int(n)
        if value < 0:
            raise InvalidCallFault(method, f"expects a non-negative integer, got {value}")
        return value

    # ── State ────────────────────────────────────────────────────────

    @property
    def model_cls(self) -> Type[Model]:
        return self._model_cls

    @property
    def is_subquery(self) -> bool:
        return self._is_subquery

    @property
    def pagination(self) -> Optional[Dict[str, Any]]:
        """Pagination block cached by the last enveloped ``all()``, if any."""
        return dict(self._pagination) if self._pagination is not None else None

    def _spawn_subquery(self) -> Query:
        """Copy filters into a new query flagged as subquery; the client is shared."""
        sub = Query(
            self._model_cls,
            config=self.config,
            http_client=self.http_client,
            unserializers=self._unserializers,
            _subquery=True,
        )
        sub._owns_client = False
        sub._select = list(self._select)
        sub._where = dict(self._where)
        sub._limit = self._limit
        sub._offset = self._offset
        return sub

    # ── URLs & parameters ────────────────────────────────────────────

    def api_base_url(self) -> str:
        return trailing_slash(self._api_url)

    def collection_url(self) -> str:
        return resource_path(self._resource_name)

    def element_url(self, element_id: Any = None) -> str:
        return resource_path(self._resource_name, element_id)

    def build_query_params(self) -> Dict[str, Any]:
        """Flatten where/select/limit/offset into query string parameters."""
        query: Dict[str, Any] = {}

        for key, value in self._where.items():
            query[key] = _coerce_numeric(value)

        if self._select:
            query[self.config.select_fields_key] = ",".join(self._select)
        if self._limit is not None:
            query[self.limit_key] = self._limit
        if self._offset is not None:
            query[self.offset_key] = self._offset

        return query

    # ── Terminal methods ─────────────────────────────────────────────

    def all(self) -> List[Model]:
        """GET the collection with the current filters."""
        return self._execute("get", self.collection_url(), query=self.build_query_params()).unwrap()

    def one(self, element_id: Any) -> Optional[Model]:
        """GET one element by id. Filters are not allowed."""
        self._ensure_no_where("one")
        return self._execute(
            "get", self.element_url(element_id), query=self.build_query_params(),
            as_collection=False,
        ).unwrap()

    def create(self, model: Model) -> Model:
        """POST the model's attributes."""
        return self._execute(
            "post", self.element_url(), json=model.get_attributes(),
            as_collection=False, model=model,
        ).unwrap()

    def update(self, model: Model) -> Model:
        """PUT the model's attributes to its element URL."""
        return self._execute(
            "put", self.element_url(model.get_primary_key()), json=model.get_attributes(),
            as_collection=False, model=model,
        ).unwrap()

    def delete(self, model: Model) -> bool:
        """DELETE the model's element URL. True iff the API answers 204."""
        response = self._request(
            "delete", self.element_url(model.get_primary_key()), json=model.get_attributes(),
        )
        if response.status_code != 204:
            logger.debug(
                f"Delete of {self._resource_name}/{model.get_primary_key()} "
                f"answered {response.status_code}"
            )
        return response.status_code == 204

    def count(self) -> int:
        """
        Total number of elements matching the current filters.

        Resolution order:
        1. Pagination cached by a previous ``all()`` on this query
        2. Subqueries always answer 0
        3. HEAD request, total-count response header
        4. Header empty and a pagination envelope configured: fetch one
           element through a subquery and read its pagination
        """
        if self._pagination:
            return _int_or_zero(self._pagination.get("totalCount"))

        if self._is_subquery:
            return 0

        header = self.config.header_name("totalCount")
        count = self._request(
            "head", self.collection_url(), query=self.build_query_params(),
        ).header(header).strip()

        # Server does not allow HEAD or does not send the header
        if count == "" and self._pagination_envelope:
            logger.debug(f"No {header} header for {self._resource_name}; counting via subquery")
            sub = self._spawn_subquery()
            sub.offset(0).limit(1).all()
            return sub.count()

        return _int_or_zero(count)

    def exists(self) -> bool:
        return self.count() > 0

    # ── Outcome variants ─────────────────────────────────────────────

    def try_all(self) -> Outcome:
        return self._execute(
            "get", self.collection_url(), query=self.build_query_params(),
            capture_transport=True,
        )

    def try_one(self, element_id: Any) -> Outcome:
        self._ensure_no_where("one")
        return self._execute(
            "get", self.element_url(element_id), query=self.build_query_params(),
            as_collection=False, capture_transport=True,
        )

    def try_create(self, model: Model) -> Outcome:
        return self._execute(
            "post", self.element_url(), json=model.get_attributes(),
            as_collection=False, model=model, capture_transport=True,
        )

    def try_update(self, model: Model) -> Outcome:
        return self._execute(
            "put", self.element_url(model.get_primary_key()), json=model.get_attributes(),
            as_collection=False, model=model, capture_transport=True,
        )

    # ── Request / response pipeline ──────────────────────────────────

    def _ensure_no_where(self, method: str) -> None:
        if self._where:
            raise InvalidCallFault(method, 'can not be called with "where" clause')

    def _request(self, method: str, url: str, **options: Any) -> Response:
        return self.http_client.request(method, url, **options)

    def _execute(
        self,
        method: str,
        url: str,
        *,
        as_collection: bool = True,
        model: Optional[Model] = None,
        capture_transport: bool = False,
        **options: Any,
    ) -> Outcome:
        try:
            response = self._request(method, url, **options)
        except ServerUnreachableFault as fault:
            if not capture_transport:
                raise
            return TransportFailure(fault)
        return self._interpret(response, as_collection=as_collection, model=model)

    def _interpret(
        self,
        response: Response,
        *,
        as_collection: bool = True,
        model: Optional[Model] = None,
    ) -> Outcome:
        """Unserialize a response and build models, or describe the failure."""
        status = response.status_code
        data = self._unserialize_response_body(response)

        if status >= 400:
            if status == 422 and model is not None:
                error = self._single_field_error(data)
                if error is not None:
                    field, message = error
                    model.add_error(field, message)
                    logger.warning(
                        f"{self._model_cls.__name__} rejected by API: {field}: {message}"
                    )
                    return ValidationFailed(model, field, message)
            message = self._error_message(data)
            logger.warning(f"{self._resource_name} request failed: HTTP {status} {message}")
            return HttpFailure(status, message)

        # Bare array - resource collection
        if isinstance(data, list):
            models = self._create_models(data)
            if as_collection:
                return Ok(models)
            return Ok(models[0] if models else None)

        # Collection with envelope, or single element
        if isinstance(data, dict):
            if as_collection:
                return Ok(self._populate_as_collection(data))
            return Ok(self._create_models([data])[0])

        logger.debug(
            f"Ignoring {type(data).__name__} body from {self._resource_name} "
            f"(HTTP {status}): {str(data)[:80]!r}"
        )
        return Ok([] if as_collection else None)

    @staticmethod
    def _single_field_error(data: Any) -> Optional[tuple]:
        if isinstance(data, list) and len(data) == 1 and isinstance(data[0], dict):
            element = data[0]
            if "field" in element and "message" in element:
                return element["field"], element["message"]
        return None

    @staticmethod
    def _error_message(data: Any) -> str:
        if isinstance(data, str):
            return data
        if isinstance(data, dict):
            return str(data.get("message", ""))
        if isinstance(data, list) and data and isinstance(data[0], dict) and "message" in data[0]:
            return str(data[0]["message"])
        return str(data)

    def _populate_as_collection(self, data: Dict[str, Any]) -> List[Model]:
        elements: Any = []
        if self._collection_envelope:
            elements = data.get(self._collection_envelope, [])
        if self._pagination_envelope and self._pagination_envelope in data:
            self._set_pagination(data[self._pagination_envelope])
        if not isinstance(elements, list):
            elements = [elements]
        return self._create_models(elements)

    def _set_pagination(self, block: Any) -> None:
        block = block if isinstance(block, dict) else {}
        self._pagination = {
            key: _coerce_numeric(block.get(name))
            for key, name in self._pagination_envelope_keys.items()
        }

    def _create_models(self, elements: List[Any]) -> List[Model]:
        models: List[Model] = []
        for element in elements:
            if not isinstance(element, dict):
                logger.warning(
                    f"Skipping non-object element in {self._resource_name} response: {element!r}"
                )
                continue
            instance = self._model_cls.instantiate()
            instance.set_attributes(element)
            instance.set_id(instance.get_attribute(self._primary_key))
            models.append(instance)
        return models

    def _unserialize_response_body(self, response: Response) -> Any:
        body = response.text
        data_type = self.config.data_type
        unserializer = self._unserializers.get(data_type)

        if unserializer is None or data_type.lower() not in response.content_type.lower():
            return body

        try:
            return unserializer.unserialize(body)
        except UnserializeFault as fault:
            logger.debug(f"Falling back to raw body: {fault.message}")
            return body

    # ── Resources ────────────────────────────────────────────────────

    def close(self) -> None:
        """Close the HTTP client if this query created it."""
        if self._owns_client:
            self.http_client.close()

    def __enter__(self) -> Query:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        flag = " subquery" if self._is_subquery else ""
        return f"<Query {self._model_cls.__name__} {self.collection_url()}{flag}>"
