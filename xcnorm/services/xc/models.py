"""Pydantic models for the canonical (standardised) XC schema.

Attributes are snake_case, they serialise to camelCase so dump(by_alias=True) gives the canonical JSON.
All identifiers are strings, all timestamps are aware UTC datetimes.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, NonNegativeInt
from pydantic.alias_generators import to_camel


class XCStandardModel(BaseModel):
    """Base for every canonical XC model."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class XCProfile(XCStandardModel):
    """Model for the account an XC login belongs to."""

    id: str
    username: str
    password: str | None = None
    message: str | None = None
    status: str | None = None
    is_trial: bool = False
    active_connections: NonNegativeInt | None = None
    max_connections: NonNegativeInt | None = None
    allowed_output_formats: list[str] = []
    created_at: datetime | None = None
    expires_at: datetime | None = None  # None is an account that never expires


class XCServerInfo(XCStandardModel):
    """Model for XC Server Information."""

    id: str
    url: str
    port: str | None = None
    https_port: str | None = None
    server_protocol: str | None = None
    rtmp_port: str | None = None
    timezone: str | None = None
    time_now: datetime | None = None
    process: bool | None = None


class XCCategory(XCStandardModel):
    """Model for XC Category, shared by live, movie and show categories."""

    id: str
    name: str
    parent_id: str


class XCChannel(XCStandardModel):
    """Model for a live channel."""

    id: str
    name: str
    number: int | None = None
    epg_id: str | None = None
    tv_archive: bool = False
    tv_archive_duration: int | None = None
    logo: str | None = None
    created_at: datetime | None = None
    category_ids: list[str] = []
    url: str | None = None


class XCMovieListing(XCStandardModel):
    """Model for a movie as it appears in the movie list."""

    id: str
    name: str
    plot: str | None = None
    vote_average: float | None = None
    poster: str | None = None
    release_date: datetime | None = None
    duration: int | None = None  # Seconds
    youtube_id: str | None = None
    cast: list[str] = []
    director: list[str] = []
    genre: list[str] = []
    created_at: datetime | None = None
    category_ids: list[str] = []
    url: str | None = None


class XCMovieRating(XCStandardModel):
    """Model for the age and MPAA rating of a movie."""

    mpaa: str | None = None
    age: int | None = None


class XCMovie(XCStandardModel):
    """Model for the full detail of a single movie."""

    id: str
    name: str
    original_name: str | None = None
    description: str | None = None
    plot: str | None = None
    country: str | None = None
    information_url: str | None = None
    tmdb_id: str | None = None
    cover: str | None = None
    poster: str | None = None
    release_date: datetime | None = None
    youtube_id: str | None = None
    director: list[str] = []
    actors: list[str] = []
    cast: list[str] = []
    genre: list[str] = []
    rating: XCMovieRating = XCMovieRating()
    duration: int | None = None  # Seconds
    duration_formatted: str | None = None
    subtitles: list[Any] = []
    vote_average: float | None = None
    created_at: datetime | None = None
    category_ids: list[str] = []
    container_extension: str | None = None
    url: str | None = None
    video: dict[str, Any] | None = None
    audio: dict[str, Any] | None = None
    bitrate: int | None = None


class XCEpisode(XCStandardModel):
    """Model for a single episode of a show."""

    id: str
    number: int | None = None
    season_number: int | None = None
    title: str | None = None
    plot: str | None = None
    release_date: datetime | None = None
    duration: int | None = None  # Seconds
    duration_formatted: str | None = None
    poster: str | None = None
    cover: str | None = None
    tmdb_id: str | None = None
    created_at: datetime | None = None
    show_id: str
    season_id: str
    vote_average: float | None = None
    container_extension: str | None = None
    url: str | None = None
    subtitles: list[Any] = []
    video: dict[str, Any] | None = None
    audio: dict[str, Any] | None = None
    bitrate: int | None = None


class XCSeason(XCStandardModel):
    """Model for a season, either from the panel or synthesised from episode groups."""

    id: str
    name: str | None = None
    number: int | None = None
    episode_count: int | None = None
    overview: str | None = None
    vote_average: float | None = None
    cover: str | None = None
    release_date: datetime | None = None
    show_id: str
    episodes: list[XCEpisode] = []


class XCShowListing(XCStandardModel):
    """Model for a show as it appears in the show list, no seasons."""

    id: str
    name: str
    plot: str | None = None
    vote_average: float | None = None
    poster: str | None = None
    cover: str | None = None
    release_date: datetime | None = None
    duration: int | None = None  # Seconds per episode
    youtube_id: str | None = None
    cast: list[str] = []
    director: list[str] = []
    genre: list[str] = []
    updated_at: datetime | None = None
    category_ids: list[str] = []


class XCShow(XCShowListing):
    """Model for the full detail of a show, always has a season list."""

    seasons: list[XCSeason]


class XCShortEPGListing(XCStandardModel):
    """Model for a short EPG listing, text fields are already base64 decoded."""

    id: str
    epg_id: str | None = None
    channel_id: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    title: str
    description: str
    language: str | None = None


class XCFullEPGListing(XCShortEPGListing):
    """Model for a full EPG listing."""

    now_playing: bool = False
    has_archive: bool = False
