"""
ActiveResource Unserializers — response body decoding.

Pluggable decoders keyed by data type (media type). The query layer picks
the decoder whose ``data_type`` matches its configured type and the
response ``Content-Type``.

Built-in unserializers:

- **JsonUnserializer** — ``application/json`` (default)
- **YamlUnserializer** — ``application/x-yaml``

Usage::

    from activeresource.unserializers import UnserializerRegistry, Unserializer

    class CsvUnserializer(Unserializer):
        data_type = "text/csv"

        def unserialize(self, data):
            return [row.split(",") for row in data.splitlines()]

    registry = UnserializerRegistry.default()
    registry.register(CsvUnserializer())
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterator, Optional

import yaml

from .faults import UnserializeFault

__all__ = [
    "JSON_TYPE",
    "YAML_TYPE",
    "Unserializer",
    "JsonUnserializer",
    "YamlUnserializer",
    "UnserializerRegistry",
]

JSON_TYPE = "application/json"
YAML_TYPE = "application/x-yaml"


# ═══════════════════════════════════════════════════════════════════════════
#  Base Unserializer
# ═══════════════════════════════════════════════════════════════════════════

class Unserializer:
    """
    Abstract unserializer.

    Subclass, set ``data_type`` and implement ``unserialize()``. Raise
    ``UnserializeFault`` when the body cannot be decoded.
    """

    data_type: str = "application/octet-stream"

    def unserialize(self, data: str) -> Any:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.data_type}>"


class JsonUnserializer(Unserializer):
    """Decode JSON bodies into dicts, lists and scalars."""

    data_type = JSON_TYPE

    def unserialize(self, data: str) -> Any:
        try:
            return json.loads(data)
        except (TypeError, ValueError) as exc:
            raise UnserializeFault(self.data_type, str(exc)) from exc


class YamlUnserializer(Unserializer):
    """Decode YAML bodies with ``yaml.safe_load``."""

    data_type = YAML_TYPE

    def unserialize(self, data: str) -> Any:
        try:
            return yaml.safe_load(data)
        except yaml.YAMLError as exc:
            raise UnserializeFault(self.data_type, str(exc)) from exc


# ═══════════════════════════════════════════════════════════════════════════
#  Registry
# ═══════════════════════════════════════════════════════════════════════════

class UnserializerRegistry:
    """
    Maps data types to unserializer instances.

    Lookups ignore case and media type parameters, so
    ``application/json; charset=utf-8`` resolves to the JSON decoder.
    """

    def __init__(self, unserializers: Optional[Dict[str, Unserializer]] = None):
        self._unserializers: Dict[str, Unserializer] = {}
        for data_type, unserializer in (unserializers or {}).items():
            self.register(unserializer, data_type=data_type)

    @classmethod
    def default(cls) -> UnserializerRegistry:
        """Registry with the built-in JSON and YAML unserializers."""
        registry = cls()
        registry.register(JsonUnserializer())
        registry.register(YamlUnserializer())
        return registry

    @staticmethod
    def _normalize(data_type: str) -> str:
        return data_type.split(";")[0].strip().lower()

    def register(self, unserializer: Unserializer, *, data_type: Optional[str] = None) -> None:
        if not isinstance(unserializer, Unserializer):
            raise TypeError(f"Expected Unserializer instance, got {type(unserializer).__name__}")
        self._unserializers[self._normalize(data_type or unserializer.data_type)] = unserializer

    def get(self, data_type: str) -> Optional[Unserializer]:
        return self._unserializers.get(self._normalize(data_type))

    def __contains__(self, data_type: str) -> bool:
        return self._normalize(data_type) in self._unserializers

    def __iter__(self) -> Iterator[str]:
        return iter(self._unserializers)

    def __len__(self) -> int:
        return len(self._unserializers)
