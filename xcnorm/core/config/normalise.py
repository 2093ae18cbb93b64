from typing import TYPE_CHECKING

import pytz
from pydantic import BaseModel, ConfigDict, field_validator

from xcnorm.constants import DEFAULT_SEASON_NAME_TEMPLATE, DEFAULT_TIMEZONE_NAME
from xcnorm.utils.logger import get_logger

if TYPE_CHECKING:
    from datetime import tzinfo
else:
    tzinfo = object

logger = get_logger(__name__)


class NormaliseConf(BaseModel):
    """Normalisation behaviour configuration definition.

    strict_coercion: malformed numbers and dates raise, when False they are logged and become null.
    naive_timezone: the zone that dates without an offset are assumed to be in, XC servers usually send local time.
    season_name_template: name given to seasons synthesised from episode groups, must contain {number}.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)  # Ignore extras for config related things

    strict_coercion: bool = True
    naive_timezone: str = DEFAULT_TIMEZONE_NAME
    season_name_template: str = DEFAULT_SEASON_NAME_TEMPLATE

    @field_validator("naive_timezone", mode="after")
    @classmethod
    def validate_naive_timezone(cls, value: str) -> str:
        """Ensure the timezone is one pytz knows about."""
        value = value.strip()
        if value not in pytz.all_timezones_set:
            logger.warning(
                "Invalid timezone '%s'. Defaulting to '%s'.",
                value,
                DEFAULT_TIMEZONE_NAME,
            )
            value = DEFAULT_TIMEZONE_NAME
        return value

    @field_validator("season_name_template", mode="after")
    @classmethod
    def validate_season_name_template(cls, value: str) -> str:
        """Ensure the template has somewhere to put the season number."""
        if "{number}" not in value:
            logger.warning(
                "season_name_template '%s' does not contain '{number}', defaulting to '%s'",
                value,
                DEFAULT_SEASON_NAME_TEMPLATE,
            )
            value = DEFAULT_SEASON_NAME_TEMPLATE
        return value

    @property
    def tz(self) -> tzinfo:
        """Get the pytz timezone for naive dates."""
        return pytz.timezone(self.naive_timezone)

    def season_name(self, number: int | str) -> str:
        """Build the name for a synthesised season."""
        return self.season_name_template.replace("{number}", str(number))
