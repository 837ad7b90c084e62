"""
ActiveResource Model Options — parsed from inner Meta class.

Contains the Options class which stores resource metadata like
api_url, resource_name, primary_key and the envelope layout.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..faults import ConfigInvalidFault


__all__ = ["Options", "DEFAULT_PAGINATION_ENVELOPE_KEYS"]


DEFAULT_PAGINATION_ENVELOPE_KEYS: Dict[str, str] = {
    "totalCount": "totalCount",
    "pageCount": "pageCount",
    "currPage": "currentPage",
    "perPageCount": "perPage",
    "links": "links",
}


class Options:
    """
    Parsed resource options from inner Meta class.

    Attributes:
        api_url: Root URL of the REST API
        resource_name: Collection path relative to api_url
        primary_key: Attribute holding the resource identifier
        collection_envelope: Response key wrapping the element list
        pagination_envelope: Response key wrapping pagination data
        pagination_envelope_keys: Canonical pagination name -> envelope key
        limit_key: Query parameter carrying the limit
        offset_key: Query parameter carrying the offset
        attributes: Declared attribute names (informational, may be empty)
        abstract: Whether the model is a base class only
    """

    __slots__ = (
        "api_url",
        "resource_name",
        "primary_key",
        "collection_envelope",
        "pagination_envelope",
        "pagination_envelope_keys",
        "limit_key",
        "offset_key",
        "attributes",
        "abstract",
    )

    def __init__(
        self,
        model_name: str,
        meta: Optional[type] = None,
        parent: Optional[Options] = None,
    ):
        def opt(name: str, default: Any) -> Any:
            if meta is not None and hasattr(meta, name):
                return getattr(meta, name)
            if parent is not None:
                return getattr(parent, name)
            return default

        self.api_url: Optional[str] = opt("api_url", None)
        self.resource_name: str = (
            getattr(meta, "resource_name", None) if meta else None
        ) or f"{model_name.lower()}s"
        self.primary_key: str = opt("primary_key", "id")
        self.collection_envelope: Optional[str] = opt("collection_envelope", None)
        self.pagination_envelope: Optional[str] = opt("pagination_envelope", None)
        keys = opt("pagination_envelope_keys", DEFAULT_PAGINATION_ENVELOPE_KEYS)
        if not isinstance(keys, Mapping):
            raise ConfigInvalidFault(
                f"{model_name}.Meta.pagination_envelope_keys",
                f"expected a mapping, got {type(keys).__name__}",
            )
        self.pagination_envelope_keys: Dict[str, str] = dict(keys)
        self.limit_key: str = opt("limit_key", "limit")
        self.offset_key: str = opt("offset_key", "offset")
        self.attributes: tuple = tuple(opt("attributes", ()))
        self.abstract: bool = getattr(meta, "abstract", False) if meta else False

    def __repr__(self) -> str:
        return f"<Options: {self.resource_name}>"
