"""Standardised serializers for XC API responses.

Each public method takes one raw (already JSON decoded) payload and returns canonical models.
Keys are camelized first, then every field goes through one of the coercion helpers.
"""

from typing import TYPE_CHECKING, Any

from xcnorm.constants import XC_ROOT_PARENT_ID
from xcnorm.core.config.normalise import NormaliseConf
from xcnorm.utils.helpers import camelize_keys
from xcnorm.utils.logger import get_logger

from .coercion import (
    as_mapping,
    as_str,
    decode_base64_text,
    first_or_none,
    flag_equals,
    from_epoch_seconds,
    parse_date,
    require_id,
    split_list,
    to_count,
    to_float,
    to_id,
    to_id_list,
    to_int,
    truthy_flag,
)
from .exceptions import MissingIdentifierError, XCNormaliseError
from .models import (
    XCCategory,
    XCChannel,
    XCEpisode,
    XCFullEPGListing,
    XCMovie,
    XCMovieListing,
    XCMovieRating,
    XCProfile,
    XCSeason,
    XCServerInfo,
    XCShortEPGListing,
    XCShow,
    XCShowListing,
)
from .reconcile import reconcile_seasons

if TYPE_CHECKING:
    from datetime import datetime
else:
    datetime = object

logger = get_logger(__name__)

Record = dict[str, Any]


def _records(payload: Any, entity: str) -> list[Record]:  # noqa: ANN401 JSON things
    """Get the list of records out of a list endpoint response.

    Some panels send {} or null instead of [] for an empty list.
    """
    if payload is None or payload == {}:
        return []

    if not isinstance(payload, list):
        msg = f"Expected a list of {entity} records, got {type(payload).__name__}"
        raise XCNormaliseError(msg)

    for record in payload:
        if not isinstance(record, dict):
            msg = f"Expected each {entity} record to be an object, got {type(record).__name__}"
            raise XCNormaliseError(msg)

    return payload


def _object(data: Any) -> Record:  # noqa: ANN401 JSON things
    """Ensure a detail payload is an object."""
    if not isinstance(data, dict):
        msg = f"Expected an object, got {type(data).__name__}"
        raise XCNormaliseError(msg)

    return data


def _unwrap(data: Any, key: str) -> Record:  # noqa: ANN401 JSON things
    """Get a record that might be wrapped in an envelope, the XC login response has two."""
    inner = _object(data).get(key)
    if isinstance(inner, dict):
        return inner

    return data


class StandardSerializer:
    """Turns raw XC payloads into the canonical models.

    Holds only frozen configuration, so one instance can be shared freely.
    """

    def __init__(self, conf: NormaliseConf | None = None) -> None:
        """Set up the serializer."""
        self.conf = conf or NormaliseConf()
        self._strict = self.conf.strict_coercion
        self._tz = self.conf.tz

    # region Coercion shortcuts
    def _int(self, value: Any) -> int | None:  # noqa: ANN401
        return to_int(value, strict=self._strict)

    def _float(self, value: Any) -> float | None:  # noqa: ANN401
        return to_float(value, strict=self._strict)

    def _epoch(self, value: Any) -> datetime | None:  # noqa: ANN401
        return from_epoch_seconds(value, strict=self._strict)

    def _date(self, value: Any) -> datetime | None:  # noqa: ANN401
        return parse_date(value, tz=self._tz, strict=self._strict)

    def _minutes_to_seconds(self, value: Any) -> int | None:  # noqa: ANN401
        minutes = self._float(value)
        if minutes is None:
            return None
        return int(minutes * 60)

    @staticmethod
    def _category_ids(record: Record) -> list[str]:
        """Get all category ids, older panels only send the single category_id."""
        if record.get("categoryIds"):
            return to_id_list(record["categoryIds"])
        return to_id_list(record.get("categoryId"))

    @staticmethod
    def _name(record: Record) -> str:
        """Get the display name, panels disagree on whether it is title or name."""
        return as_str(record.get("title")) or as_str(record.get("name")) or ""

    # region Account
    def profile(self, payload: Any) -> XCProfile:  # noqa: ANN401 JSON things
        """Serialize the user_info part of the XC login response."""
        user = _unwrap(camelize_keys(payload, deep=True), "userInfo")

        return XCProfile(
            id=require_id(user, "username", entity="profile"),
            username=str(user["username"]),
            password=as_str(user.get("password")),
            message=as_str(user.get("message")),
            status=as_str(user.get("status")),
            is_trial=flag_equals(user.get("isTrial"), "1"),
            active_connections=to_count(user.get("activeCons"), strict=self._strict),
            max_connections=to_count(user.get("maxConnections"), strict=self._strict),
            allowed_output_formats=split_list(user.get("allowedOutputFormats")),
            created_at=self._epoch(user.get("createdAt")),
            expires_at=self._epoch(user.get("expDate")),
        )

    def server_info(self, payload: Any) -> XCServerInfo:  # noqa: ANN401 JSON things
        """Serialize the server_info part of the XC login response."""
        server = _unwrap(camelize_keys(payload, deep=True), "serverInfo")
        process = server.get("process")

        return XCServerInfo(
            id=require_id(server, "url", entity="server info"),
            url=str(server["url"]),
            port=as_str(server.get("port")),
            https_port=as_str(server.get("httpsPort")),
            server_protocol=as_str(server.get("serverProtocol")),
            rtmp_port=as_str(server.get("rtmpPort")),
            timezone=as_str(server.get("timezone")),
            time_now=self._epoch(server.get("timestampNow")),
            process=None if process is None else truthy_flag(process),
        )

    # region Live
    def categories(self, payload: Any) -> list[XCCategory]:  # noqa: ANN401 JSON things
        """Serialize live, movie or show categories, they all share a shape."""
        categories = [
            XCCategory(
                id=require_id(category, "categoryId", entity="category"),
                name=as_str(category.get("categoryName")) or "",
                parent_id=to_id(category.get("parentId")) or XC_ROOT_PARENT_ID,
            )
            for category in camelize_keys(_records(payload, "category"))
        ]
        logger.trace("Serialized %d categories", len(categories))
        return categories

    def channels(self, payload: Any) -> list[XCChannel]:  # noqa: ANN401 JSON things
        """Serialize the live stream list."""
        channels = [
            XCChannel(
                id=require_id(channel, "streamId", entity="channel"),
                name=as_str(channel.get("name")) or "",
                number=self._int(channel.get("num")),
                epg_id=as_str(channel.get("epgChannelId")),
                tv_archive=flag_equals(channel.get("tvArchive"), 1),
                tv_archive_duration=self._int(channel.get("tvArchiveDuration")),
                logo=as_str(channel.get("streamIcon")),
                created_at=self._epoch(channel.get("added")),
                category_ids=self._category_ids(channel),
                url=as_str(channel.get("url")),
            )
            for channel in camelize_keys(_records(payload, "channel"))
        ]
        logger.trace("Serialized %d channels", len(channels))
        return channels

    # region Movies
    def movies(self, payload: Any) -> list[XCMovieListing]:  # noqa: ANN401 JSON things
        """Serialize the movie (VOD) list, run time is sent in minutes."""
        movies = [
            XCMovieListing(
                id=require_id(movie, "streamId", entity="movie"),
                name=self._name(movie),
                plot=as_str(movie.get("plot")),
                vote_average=self._float(movie.get("rating")),
                poster=as_str(movie.get("streamIcon")),
                release_date=self._date(movie.get("releaseDate") or movie.get("releasedate")),
                duration=self._minutes_to_seconds(movie.get("episodeRunTime")),
                youtube_id=as_str(movie.get("youtubeTrailer")),
                cast=split_list(movie.get("cast")),
                director=split_list(movie.get("director")),
                genre=split_list(movie.get("genre")),
                created_at=self._epoch(movie.get("added")),
                category_ids=self._category_ids(movie),
                url=as_str(movie.get("url")),
            )
            for movie in camelize_keys(_records(payload, "movie"))
        ]
        logger.trace("Serialized %d movies", len(movies))
        return movies

    def movie(self, payload: Any) -> XCMovie:  # noqa: ANN401 JSON things
        """Serialize a single movie, merging the info and movie_data halves."""
        data = _object(camelize_keys(payload, deep=True))
        info: Record = as_mapping(data.get("info")) or {}
        movie_data: Record = as_mapping(data.get("movieData")) or {}

        return XCMovie(
            id=require_id(movie_data, "streamId", entity="movie"),
            name=self._name(info) or self._name(movie_data),
            original_name=as_str(info.get("oName")),
            description=as_str(info.get("description")),
            plot=as_str(info.get("plot")),
            country=as_str(info.get("country")),
            information_url=as_str(info.get("kinopoiskUrl")),
            tmdb_id=to_id(info.get("tmdbId")) or to_id(info.get("tmdb")) or None,
            cover=first_or_none(info.get("backdropPath")),
            poster=as_str(info.get("movieImage")),
            release_date=self._date(info.get("releaseDate") or info.get("releasedate")),
            youtube_id=as_str(info.get("youtubeTrailer")),
            director=split_list(info.get("director")),
            actors=split_list(info.get("actors")),
            cast=split_list(info.get("cast")),
            genre=split_list(info.get("genre")),
            rating=XCMovieRating(
                mpaa=as_str(info.get("mpaaRating")),
                age=self._int(info.get("age")),
            ),
            duration=self._int(info.get("durationSecs")),
            duration_formatted=as_str(info.get("duration")),
            subtitles=info.get("subtitles") or [],
            vote_average=self._float(info.get("rating")),
            created_at=self._epoch(movie_data.get("added")),
            category_ids=self._category_ids(movie_data),
            container_extension=as_str(movie_data.get("containerExtension")),
            url=as_str(data.get("url")) or as_str(movie_data.get("url")),
            video=as_mapping(info.get("video")),
            audio=as_mapping(info.get("audio")),
            bitrate=self._int(info.get("bitrate")),
        )

    # region Shows
    def _show_fields(self, show: Record, show_id: str) -> Record:
        """Fields shared by the show list and show detail."""
        return {
            "id": show_id,
            "name": self._name(show),
            "plot": as_str(show.get("plot")),
            "vote_average": self._float(show.get("rating")),
            "poster": as_str(show.get("cover")),
            "cover": first_or_none(show.get("backdropPath")),
            "release_date": self._date(show.get("releaseDate") or show.get("releasedate")),
            "duration": self._minutes_to_seconds(show.get("episodeRunTime")),
            "youtube_id": as_str(show.get("youtubeTrailer")),
            "cast": split_list(show.get("cast")),
            "director": split_list(show.get("director")),
            "genre": split_list(show.get("genre")),
            "updated_at": self._epoch(show.get("lastModified")),
            "category_ids": self._category_ids(show),
        }

    def shows(self, payload: Any) -> list[XCShowListing]:  # noqa: ANN401 JSON things
        """Serialize the show (series) list, no seasons are included."""
        shows = [
            XCShowListing(**self._show_fields(show, require_id(show, "seriesId", entity="show")))
            for show in camelize_keys(_records(payload, "show"))
        ]
        logger.trace("Serialized %d shows", len(shows))
        return shows

    def show(self, payload: Any, *, series_id: str | int | None = None) -> XCShow:  # noqa: ANN401 JSON things
        """Serialize a single show with its seasons and episodes.

        The info block does not always carry the series id, series_id is used when it is missing.
        With neither there is no identity for the show so this raises, no partial show is built.
        """
        data = _object(camelize_keys(payload, deep=True))
        info: Record = as_mapping(data.get("info")) or {}

        show_id = to_id(info.get("seriesId")) or to_id(series_id)
        if not show_id:
            raise MissingIdentifierError("show", ("series_id",))

        seasons = reconcile_seasons(
            data.get("seasons"),
            data.get("episodes"),
            show_id=show_id,
            serializer=self,
        )
        logger.trace("Serialized show %s with %d seasons", show_id, len(seasons))

        return XCShow(**self._show_fields(info, show_id), seasons=seasons)

    def season(self, raw: Record, *, show_id: str, season_id: str, episodes: list[XCEpisode]) -> XCSeason:
        """Serialize one camelized season record, real or synthesised."""
        return XCSeason(
            id=season_id,
            name=as_str(raw.get("name")),
            number=self._int(raw.get("seasonNumber")),
            episode_count=self._int(raw.get("episodeCount")),
            overview=as_str(raw.get("overview")),
            vote_average=self._float(raw.get("voteAverage")),
            cover=as_str(raw.get("coverBig")) or as_str(raw.get("cover")),
            release_date=self._date(raw.get("airDate")),
            show_id=show_id,
            episodes=episodes,
        )

    def episode(
        self,
        raw: Record,
        *,
        show_id: str,
        season_id: str,
        season_number: str | None = None,
    ) -> XCEpisode:
        """Serialize one camelized episode, merging the top level and info halves."""
        info: Record = as_mapping(raw.get("info")) or {}

        return XCEpisode(
            id=require_id(raw, "id", entity="episode"),
            number=self._int(raw.get("episodeNum")),
            season_number=self._int(season_number),
            title=as_str(raw.get("title")),
            plot=as_str(info.get("plot")) or as_str(raw.get("plot")),
            release_date=self._date(info.get("releaseDate") or info.get("airDate")),
            duration=self._int(info.get("durationSecs")),
            duration_formatted=as_str(info.get("duration")),
            poster=as_str(info.get("movieImage")),
            cover=as_str(info.get("coverBig")),
            tmdb_id=to_id(info.get("tmdbId")) or None,
            created_at=self._epoch(raw.get("added")),
            show_id=show_id,
            season_id=season_id,
            vote_average=self._float(info.get("rating")),
            container_extension=as_str(raw.get("containerExtension")),
            url=as_str(raw.get("url")),
            subtitles=raw.get("subtitles") or info.get("subtitles") or [],
            video=as_mapping(info.get("video")),
            audio=as_mapping(info.get("audio")),
            bitrate=self._int(info.get("bitrate")),
        )

    # region EPG
    @staticmethod
    def _epg_listings(payload: Any) -> list[Record]:  # noqa: ANN401 JSON things
        data = camelize_keys(payload, deep=True)
        if isinstance(data, dict):
            data = data.get("epgListings")
        return _records(data, "EPG listing")

    def _epg_fields(self, listing: Record) -> Record:
        """Fields shared by the short and full EPG."""
        if listing.get("startTimestamp") not in (None, ""):
            start = self._epoch(listing["startTimestamp"])
        else:
            start = self._date(listing.get("start"))

        if listing.get("stopTimestamp") not in (None, ""):
            end = self._epoch(listing["stopTimestamp"])
        else:
            end = self._date(listing.get("end") or listing.get("stop"))

        return {
            "id": require_id(listing, "id", entity="EPG listing"),
            "epg_id": to_id(listing.get("epgId")),
            "channel_id": to_id(listing.get("channelId")),
            "start": start,
            "end": end,
            "title": decode_base64_text(listing.get("title")),
            "description": decode_base64_text(listing.get("description")),
            "language": as_str(listing.get("lang")),
        }

    def short_epg(self, payload: Any) -> list[XCShortEPGListing]:  # noqa: ANN401 JSON things
        """Serialize a short EPG (get_short_epg) response."""
        listings = [XCShortEPGListing(**self._epg_fields(listing)) for listing in self._epg_listings(payload)]
        logger.trace("Serialized %d short EPG listings", len(listings))
        return listings

    def full_epg(self, payload: Any) -> list[XCFullEPGListing]:  # noqa: ANN401 JSON things
        """Serialize a full EPG (get_simple_data_table) response."""
        listings = [
            XCFullEPGListing(
                **self._epg_fields(listing),
                now_playing=truthy_flag(listing.get("nowPlaying")),
                has_archive=truthy_flag(listing.get("hasArchive")),
            )
            for listing in self._epg_listings(payload)
        ]
        logger.trace("Serialized %d full EPG listings", len(listings))
        return listings
