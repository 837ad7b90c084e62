"""
ActiveResource Models — REST resources as Python objects.

Exports:
    Model, ModelMeta     — resource base class and its metaclass
    Options              — resource metadata parsed from Meta
    Manager              — ``Model.objects`` descriptor
    Query                — chainable query with HTTP terminals
    Ok, ValidationFailed, HttpFailure, TransportFailure, Outcome
"""

from .options import Options, DEFAULT_PAGINATION_ENVELOPE_KEYS
from .outcome import Ok, ValidationFailed, HttpFailure, TransportFailure, Outcome
from .query import Query
from .manager import Manager
from .base import Model, ModelMeta

__all__ = [
    "Model",
    "ModelMeta",
    "Options",
    "DEFAULT_PAGINATION_ENVELOPE_KEYS",
    "Manager",
    "Query",
    "Ok",
    "ValidationFailed",
    "HttpFailure",
    "TransportFailure",
    "Outcome",
]
