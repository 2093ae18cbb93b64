"""Normalise Xtream Codes API responses into a canonical schema."""

from .services.xc import (
    SERIALIZERS,
    StandardSerializer,
    XCNormaliseError,
    dump,
    serialize,
)
from .version import __version__

__all__ = [
    "SERIALIZERS",
    "StandardSerializer",
    "XCNormaliseError",
    "__version__",
    "dump",
    "serialize",
]
