"""
Config system - Layered typed configuration for resource queries.

``QueryConfig`` holds the transport and wire-format settings a ``Query``
uses. ``ConfigLoader`` builds one from files, a ``.env`` file, environment
variables and overrides, with later sources taking precedence.
"""

from typing import Any, Dict, Iterable, Optional, Tuple, Union, get_type_hints, get_origin, get_args
from dataclasses import dataclass, field, fields
from glob import glob
from pathlib import Path
import os
import json
import types

import yaml

from .unserializers import JSON_TYPE


DEFAULT_RESPONSE_HEADERS: Dict[str, str] = {
    "totalCount": "X-Pagination-Total-Count",
    "pageCount": "X-Pagination-Page-Count",
    "currPage": "X-Pagination-Current-Page",
    "perPageCount": "X-Pagination-Per-Page",
    "links": "Link",
}


@dataclass
class QueryConfig:
    """
    Settings shared by every query built against a resource.

    Attributes:
        data_type: Media type of requests and responses
        request_headers: Default request headers (``Accept: data_type`` if empty)
        response_headers: Canonical pagination name -> response header name
        select_fields_key: Query parameter carrying selected fields
        timeout: Request timeout in seconds
        http_client_extra_config: Extra keyword arguments for ``httpx.Client``
    """

    data_type: str = JSON_TYPE
    request_headers: Dict[str, str] = field(default_factory=dict)
    response_headers: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_RESPONSE_HEADERS))
    select_fields_key: str = "fields"
    timeout: Optional[float] = 30.0
    http_client_extra_config: Dict[str, Any] = field(default_factory=dict)

    def get_request_headers(self) -> Dict[str, str]:
        return dict(self.request_headers) if self.request_headers else {"Accept": self.data_type}

    def header_name(self, key: str) -> str:
        """Response header for a canonical pagination key, with defaults."""
        return self.response_headers.get(key) or DEFAULT_RESPONSE_HEADERS[key]


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


class ConfigLoader:
    """
    Collects raw settings from several sources, then validates them into a
    ``QueryConfig``.

    Precedence (highest first): overrides, environment variables, ``.env``
    file, config files, ``QueryConfig`` defaults.

    Environment keys drop the prefix, are lower-cased and use ``__`` for
    nesting: ``AR_RESPONSE_HEADERS__TOTALCOUNT=X-Total`` becomes
    ``{"response_headers": {"totalcount": "X-Total"}}``. Values are read as
    YAML scalars, so ``5``, ``2.5``, ``true`` and ``{"a": 1}`` keep their type.
    """

    def __init__(self, env_prefix: str = "AR_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        paths: Optional[list[str]] = None,
        env_prefix: str = "AR_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ConfigLoader":
        """
        Args:
            paths: Config files (``.json``, ``.yaml``, ``.yml``); glob patterns allowed
            env_prefix: Prefix selecting environment variables
            env_file: Optional ``.env`` file, ignored when absent
            overrides: Explicit values, applied last
        """
        loader = cls(env_prefix=env_prefix)
        for pattern in paths or []:
            for path in sorted(glob(pattern)):
                loader._merge(loader.config_data, loader._read_file(Path(path)))
        if env_file and Path(env_file).exists():
            loader._apply_env(loader._read_env_file(Path(env_file)))
        loader._apply_env(os.environ.items())
        if overrides:
            loader._merge(loader.config_data, overrides)
        return loader

    # ── Sources ──────────────────────────────────────────────────────

    @staticmethod
    def _read_file(path: Path) -> Dict[str, Any]:
        if path.suffix not in (".json", ".yaml", ".yml"):
            return {}
        with open(path) as f:
            data = json.load(f) if path.suffix == ".json" else yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return data

    @staticmethod
    def _read_env_file(path: Path) -> Iterable[Tuple[str, str]]:
        pairs = []
        for line in path.read_text().splitlines():
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, value = line.split("=", 1)
                pairs.append((key.strip(), value.strip().strip("'\"")))
        return pairs

    def _apply_env(self, pairs: Iterable[Tuple[str, str]]) -> None:
        for key, raw in pairs:
            if not key.startswith(self.env_prefix):
                continue
            *parents, leaf = key[len(self.env_prefix):].lower().split("__")
            nested: Dict[str, Any] = {leaf: self._coerce(raw)}
            for name in reversed(parents):
                nested = {name: nested}
            self._merge(self.config_data, nested)

    @staticmethod
    def _coerce(raw: str) -> Any:
        """Typed value of an environment string; unparseable text stays a string."""
        if raw == "":
            return raw
        try:
            value = yaml.safe_load(raw)
        except yaml.YAMLError:
            return raw
        if value is None or isinstance(value, (bool, int, float, dict, list)):
            return value
        return raw

    @classmethod
    def _merge(cls, target: Dict[str, Any], source: Dict[str, Any]) -> None:
        for key, value in source.items():
            current = target.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                cls._merge(current, value)
            else:
                target[key] = value

    # ── Validation ───────────────────────────────────────────────────

    def query_config(self, section: Optional[str] = None) -> QueryConfig:
        """
        Build a validated ``QueryConfig``.

        Args:
            section: Optional dot path of a nested section to read from

        Raises:
            ConfigError: On unknown keys or values of the wrong type
        """
        data: Any = self.config_data
        for part in section.split(".") if section else []:
            data = data.get(part, {}) if isinstance(data, dict) else None
        if not isinstance(data, dict):
            raise ConfigError(f"Config section '{section}' is not a mapping")

        hints = get_type_hints(QueryConfig)
        names = {f.name.lower(): f.name for f in fields(QueryConfig)}

        unknown = sorted(key for key in data if key.lower() not in names)
        if unknown:
            raise ConfigError(f"Unknown config field(s): {', '.join(unknown)}")

        kwargs = {}
        for key, value in data.items():
            name = names[key.lower()]
            if name == "response_headers" and isinstance(value, dict):
                value = self._restore_header_keys(value)
            if not self._matches(value, hints[name]):
                raise ConfigError(
                    f"Config field '{name}' expected {hints[name]}, got {type(value).__name__}"
                )
            kwargs[name] = value
        return QueryConfig(**kwargs)

    @staticmethod
    def _restore_header_keys(value: Dict[str, Any]) -> Dict[str, Any]:
        """Environment variables arrive lower-cased; map back to canonical keys."""
        canonical = {key.lower(): key for key in DEFAULT_RESPONSE_HEADERS}
        merged = dict(DEFAULT_RESPONSE_HEADERS)
        for key, header in value.items():
            merged[canonical.get(key.lower(), key)] = header
        return merged

    @classmethod
    def _matches(cls, value: Any, hint: Any) -> bool:
        """Shallow isinstance check against a type hint; unions match any member."""
        origin = get_origin(hint)
        if origin is Union or origin is types.UnionType:
            return any(cls._matches(value, arg) for arg in get_args(hint))
        if hint is Any:
            return True
        if hint is type(None):
            return value is None
        if isinstance(value, bool):
            return hint is bool
        if hint is float:
            return isinstance(value, (int, float))
        return isinstance(value, origin or hint)
