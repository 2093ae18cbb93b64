"""XC (Xtream Codes) payload normalisation."""

from .exceptions import (
    CoercionError,
    DecodingError,
    MissingIdentifierError,
    UnknownSerializerError,
    XCNormaliseError,
)
from .registry import SERIALIZERS, dump, serialize
from .serializers import StandardSerializer

__all__ = [
    "SERIALIZERS",
    "CoercionError",
    "DecodingError",
    "MissingIdentifierError",
    "StandardSerializer",
    "UnknownSerializerError",
    "XCNormaliseError",
    "dump",
    "serialize",
]
