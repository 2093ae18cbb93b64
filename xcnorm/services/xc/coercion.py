"""Scalar coercion helpers shared by every XC serializer.

XC panels are loose with types, the same field can be a number on one server and a string on the next.
Each helper here states the defaulting rule for one kind of field, so the serializers never parse inline.
"""

import base64
import binascii
import math
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pytz

from xcnorm.utils.logger import get_logger

from .exceptions import CoercionError, DecodingError, MissingIdentifierError

if TYPE_CHECKING:
    from datetime import tzinfo
else:
    tzinfo = object

logger = get_logger(__name__)

# Tried in order after datetime.fromisoformat gives up
FREE_FORM_DATE_FORMATS = (
    "%Y-%m-%d",  # fromisoformat wants zero padding, panels send 2019-9-26
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%d %B %Y",
    "%d %b %Y",
    "%d %B, %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%Y-%m",
    "%B %Y",
    "%b %Y",
    "%Y",
)


def _coercion_failed(value: object, target: str, *, strict: bool) -> None:
    """Raise in strict mode, otherwise warn and let the caller return None."""
    if strict:
        raise CoercionError(value, target)

    logger.warning("Cannot coerce %r to %s, using null", value, target)


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


# region Identifiers
def to_id(value: Any) -> str | None:  # noqa: ANN401 JSON things
    """Stringify an identifier, integral floats lose their trailing .0."""
    if value is None:
        return None

    if isinstance(value, float) and value.is_integer():
        return str(int(value))

    if isinstance(value, str):
        return value.strip()

    return str(value)


def require_id(record: Mapping[str, Any], *keys: str, entity: str) -> str:
    """Get the first usable identifier from a record, raise if there is none."""
    for key in keys:
        identifier = to_id(record.get(key))
        if identifier:
            return identifier

    raise MissingIdentifierError(entity, keys)


def to_id_list(value: Any) -> list[str]:  # noqa: ANN401 JSON things
    """Stringify a list of identifiers, dropping empties."""
    if _is_blank(value):
        return []

    if not isinstance(value, list):
        value = [value]

    return [identifier for identifier in (to_id(item) for item in value) if identifier]


# region Numbers
def to_float(value: Any, *, strict: bool = True) -> float | None:  # noqa: ANN401 JSON things
    """Coerce a number or numeric string to a float, blank values are None."""
    if _is_blank(value):
        return None

    if isinstance(value, bool):
        return float(value)

    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        _coercion_failed(value, "number", strict=strict)
        return None

    if not math.isfinite(number):
        _coercion_failed(value, "number", strict=strict)
        return None

    return number


def to_int(value: Any, *, strict: bool = True) -> int | None:  # noqa: ANN401 JSON things
    """Coerce a number or numeric string to an int, fractions are truncated."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value

    number = to_float(value, strict=strict)
    if number is None:
        return None

    return int(number)


def to_count(value: Any, *, strict: bool = True) -> int | None:  # noqa: ANN401 JSON things
    """Coerce a count, negative numbers are malformed."""
    count = to_int(value, strict=strict)
    if count is not None and count < 0:
        _coercion_failed(value, "count", strict=strict)
        return None

    return count


# region Dates
def from_epoch_seconds(value: Any, *, strict: bool = True) -> datetime | None:  # noqa: ANN401 JSON things
    """Convert seconds since the epoch to an aware UTC datetime."""
    seconds = to_float(value, strict=strict)
    if seconds is None:
        return None

    try:
        return datetime.fromtimestamp(seconds, tz=UTC)
    except (OverflowError, OSError, ValueError):
        _coercion_failed(value, "epoch timestamp", strict=strict)
        return None


def parse_date(
    value: Any,  # noqa: ANN401 JSON things
    *,
    tz: tzinfo = pytz.utc,
    strict: bool = True,
) -> datetime | None:
    """Parse a free-form date string into an aware UTC datetime.

    Empty or missing dates are None, never an invalid date.
    Dates without an offset are taken to be in tz.
    """
    if _is_blank(value):
        return None

    if isinstance(value, datetime):
        parsed: datetime | None = value
    else:
        parsed = _parse_date_string(str(value).strip())

    if parsed is None:
        _coercion_failed(value, "date", strict=strict)
        return None

    if parsed.tzinfo is None:
        parsed = _localise(parsed, tz)

    return parsed.astimezone(UTC)


def _parse_date_string(value: str) -> datetime | None:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        pass

    for date_format in FREE_FORM_DATE_FORMATS:
        try:
            return datetime.strptime(value, date_format)  # noqa: DTZ007 Localised by the caller
        except ValueError:
            continue

    return None


def _localise(naive: datetime, tz: tzinfo) -> datetime:
    """Attach a timezone, pytz zones need localize() to get the right offset."""
    localize = getattr(tz, "localize", None)
    if localize is not None:
        return localize(naive)

    return naive.replace(tzinfo=tz)


# region Lists
def split_list(value: Any) -> list[str]:  # noqa: ANN401 JSON things
    """Split a comma joined string into trimmed parts, missing values give an empty list."""
    if value is None:
        return []

    parts = value if isinstance(value, list) else str(value).split(",")

    return [part for part in (str(item).strip() for item in parts if item is not None) if part]


def first_or_none(value: Any) -> str | None:  # noqa: ANN401 JSON things
    """Get the first entry of a list field that is sometimes sent as a plain string."""
    if isinstance(value, list):
        return next((str(item) for item in value if not _is_blank(item)), None)

    if _is_blank(value):
        return None

    return str(value)


def as_mapping(value: Any) -> dict[str, Any] | None:  # noqa: ANN401 JSON things
    """Return a non-empty dict, XC sends [] when a nested object is absent."""
    if isinstance(value, dict) and value:
        return value

    return None


def as_str(value: Any) -> str | None:  # noqa: ANN401 JSON things
    """Stringify optional text, blank values are None."""
    if _is_blank(value):
        return None

    return str(value)


# region Flags
def flag_equals(value: Any, expected: str | int) -> bool:  # noqa: ANN401 JSON things
    """Exact match flag, the type has to match too so '1' is not 1 and True is not 1."""
    return type(value) is type(expected) and value == expected


def truthy_flag(value: Any) -> bool:  # noqa: ANN401 JSON things
    """General truthiness flag, note that the string '0' is True."""
    return bool(value)


# region Text
def decode_base64_text(value: Any) -> str:  # noqa: ANN401 JSON things
    """Decode base64 text to a UTF-8 string.

    Whitespace is ignored and missing padding is tolerated, anything else malformed raises DecodingError.
    """
    if _is_blank(value):
        return ""

    if not isinstance(value, str):
        msg = f"Expected base64 text, got {type(value).__name__}"
        raise DecodingError(msg)

    compact = "".join(value.split())
    compact += "=" * (-len(compact) % 4)

    try:
        return base64.b64decode(compact, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        msg = f"Cannot decode base64 text {value!r}"
        raise DecodingError(msg) from exc
