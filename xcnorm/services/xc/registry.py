"""Named serializer dispatch, one name per XC API action."""

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from xcnorm.utils.logger import get_logger

from .exceptions import UnknownSerializerError
from .serializers import StandardSerializer

if TYPE_CHECKING:
    from xcnorm.core.config.normalise import NormaliseConf
else:
    NormaliseConf = object

logger = get_logger(__name__)

# Serializer name -> StandardSerializer method
SERIALIZERS: dict[str, str] = {
    "profile": "profile",
    "serverInfo": "server_info",
    "channelCategories": "categories",
    "movieCategories": "categories",
    "showCategories": "categories",
    "channels": "channels",
    "movies": "movies",
    "movie": "movie",
    "shows": "shows",
    "show": "show",
    "shortEPG": "short_epg",
    "fullEPG": "full_epg",
}


def serialize(
    kind: str,
    payload: Any,  # noqa: ANN401 JSON things
    *,
    serializer: StandardSerializer | None = None,
    conf: NormaliseConf | None = None,
    **kwargs: Any,  # noqa: ANN401 Passed through to the serializer
) -> BaseModel | list[BaseModel]:
    """Serialize a raw payload with the serializer registered under kind."""
    method_name = SERIALIZERS.get(kind)
    if method_name is None:
        raise UnknownSerializerError(kind, list(SERIALIZERS))

    if serializer is None:
        serializer = StandardSerializer(conf)

    logger.debug("Serializing %s payload", kind)
    result: BaseModel | list[BaseModel] = getattr(serializer, method_name)(payload, **kwargs)
    return result


def dump(result: BaseModel | list[BaseModel]) -> Any:  # noqa: ANN401 JSON things
    """Get the canonical JSON ready form of a serializer result, camelCase keys and ISO dates."""
    if isinstance(result, list):
        return [item.model_dump(mode="json", by_alias=True) for item in result]

    return result.model_dump(mode="json", by_alias=True)
