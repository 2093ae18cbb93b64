"""Show detail reconciliation, matching episodes to seasons.

get_series_info gives three loosely related parts: a season list (often empty), episodes grouped by season
number, and the show info. This builds the season -> episode tree from them.

1. Episode groups are flattened in arrival order, keeping the group key.
2. Each episode resolves its season id: the id of the first season with the same season number, otherwise
   the season number itself.
3. With no season list, a season is synthesised for every episode group. Episodes whose season id still
   matches no season get a synthesised season too, so every episode ends up in exactly one season.
4. Each season gets the episodes with its id, in flattened order.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from xcnorm.utils.logger import get_logger

from .coercion import as_mapping, to_id
from .exceptions import MissingIdentifierError, XCNormaliseError

if TYPE_CHECKING:
    from .models import XCEpisode, XCSeason
    from .serializers import StandardSerializer
else:
    XCEpisode = object
    XCSeason = object
    StandardSerializer = object

logger = get_logger(__name__)

Record = dict[str, Any]


@dataclass
class EpisodeGroup:
    """Raw episodes that arrived under one season key."""

    key: str
    episodes: list[Record] = field(default_factory=list)


@dataclass
class FlatEpisode:
    """A raw episode with the season number it was resolved to."""

    raw: Record
    season_number: str
    season_id: str


def season_key(value: Any) -> str | None:  # noqa: ANN401 JSON things
    """Normalise a season number so 1, 1.0, '1' and '01' all compare equal."""
    identifier = to_id(value)
    if not identifier:
        return None

    if identifier.lstrip("-").isdigit():
        return str(int(identifier))

    return identifier


def numeric_season(key: str) -> str | None:
    """Get the key back if it is a plain season number, panels sometimes use labels instead."""
    if key.lstrip("-").isdigit():
        return key
    return None


def group_episodes(episodes: Any) -> list[EpisodeGroup]:  # noqa: ANN401 JSON things
    """Get the episode groups in arrival order.

    Normally a dict of season number to episode list, but panels also send a list of lists,
    a flat list of episodes, or [] when the show has no episodes.
    """
    if not episodes:
        return []

    if isinstance(episodes, dict):
        # Keys like "1" and "01" are the same season, so their groups are merged
        merged: dict[str, EpisodeGroup] = {}
        for key, group in episodes.items():
            normalised = season_key(key) or str(key)
            merged.setdefault(normalised, EpisodeGroup(key=normalised)).episodes.extend(_episode_list(group))
        return list(merged.values())

    if not isinstance(episodes, list):
        msg = f"Expected episodes to be an object or a list, got {type(episodes).__name__}"
        raise XCNormaliseError(msg)

    if all(isinstance(group, list) for group in episodes):
        groups: dict[str, EpisodeGroup] = {}
        for position, group in enumerate(episodes, start=1):
            group_list = _episode_list(group)
            first_season = season_key(group_list[0].get("season")) if group_list else None
            key = first_season or str(position)
            groups.setdefault(key, EpisodeGroup(key=key)).episodes.extend(group_list)
        return list(groups.values())

    # Flat list, group on each episode's own season number
    grouped: dict[str, EpisodeGroup] = {}
    for episode in _episode_list(episodes):
        key = season_key(episode.get("season")) or "1"
        grouped.setdefault(key, EpisodeGroup(key=key)).episodes.append(episode)
    return list(grouped.values())


def _episode_list(group: Any) -> list[Record]:  # noqa: ANN401 JSON things
    if not isinstance(group, list):
        msg = f"Expected a list of episodes, got {type(group).__name__}"
        raise XCNormaliseError(msg)

    for episode in group:
        if not isinstance(episode, dict):
            msg = f"Expected each episode to be an object, got {type(episode).__name__}"
            raise XCNormaliseError(msg)

    return group


def build_season_index(seasons: list[Record]) -> dict[str, str]:
    """Map season number to season id, the first season with a given number wins."""
    index: dict[str, str] = {}
    for season in seasons:
        number = season_key(season.get("seasonNumber"))
        season_id = to_id(season.get("id"))
        if number and season_id:
            index.setdefault(number, season_id)
    return index


def flatten_episodes(groups: list[EpisodeGroup], season_index: dict[str, str]) -> list[FlatEpisode]:
    """Flatten the groups and resolve every episode's season id."""
    flat: list[FlatEpisode] = []
    for group in groups:
        for raw in group.episodes:
            number = season_key(raw.get("season")) or group.key
            flat.append(FlatEpisode(raw=raw, season_number=number, season_id=season_index.get(number, number)))
    return flat


def synthesise_season(key: str, episodes: list[Record], season_name: str) -> Record:
    """Build a camelized season record from a group of episodes, details come from the first one."""
    first_info: Record = {}
    if episodes:
        first_info = as_mapping(episodes[0].get("info")) or {}

    return {
        "id": key,
        "name": season_name,
        "episodeCount": len(episodes),
        "overview": "",
        "airDate": first_info.get("releaseDate") or first_info.get("airDate"),
        "cover": first_info.get("movieImage"),
        "coverBig": first_info.get("movieImage"),
        "seasonNumber": numeric_season(key),
        "voteAverage": first_info.get("rating"),
    }


def _real_season_id(season: Record) -> str:
    """A panel season is keyed on its id, falling back to its number."""
    season_id = to_id(season.get("id")) or season_key(season.get("seasonNumber"))
    if not season_id:
        raise MissingIdentifierError("season", ("id", "season_number"))
    return season_id


def reconcile_seasons(
    seasons: Any,  # noqa: ANN401 JSON things
    episodes: Any,  # noqa: ANN401 JSON things
    *,
    show_id: str,
    serializer: StandardSerializer,
) -> list[XCSeason]:
    """Build the seasons of a show, each with its episodes attached."""
    if isinstance(seasons, dict):  # Some panels key the season list by number
        seasons = list(seasons.values())
    season_records: list[Record] = [season for season in (seasons or []) if isinstance(season, dict)]
    groups = group_episodes(episodes)

    flat = flatten_episodes(groups, build_season_index(season_records))

    seasons_to_map: list[tuple[str, Record]] = [(_real_season_id(season), season) for season in season_records]

    if not seasons_to_map:
        logger.debug("Show %s has no season list, synthesising %d seasons", show_id, len(groups))
        seasons_to_map = [
            (group.key, synthesise_season(group.key, group.episodes, serializer.conf.season_name(group.key)))
            for group in groups
        ]

    # Episodes that point at a season we don't have
    known_ids = {season_id for season_id, _ in seasons_to_map}
    orphans: dict[str, list[Record]] = {}
    for episode in flat:
        if episode.season_id not in known_ids:
            orphans.setdefault(episode.season_id, []).append(episode.raw)

    for season_id, orphan_episodes in orphans.items():
        logger.debug(
            "Show %s has %d episodes in unknown season %s, synthesising it",
            show_id,
            len(orphan_episodes),
            season_id,
        )
        seasons_to_map.append(
            (season_id, synthesise_season(season_id, orphan_episodes, serializer.conf.season_name(season_id)))
        )

    mapped_episodes: list[XCEpisode] = [
        serializer.episode(
            episode.raw,
            show_id=show_id,
            season_id=episode.season_id,
            season_number=numeric_season(episode.season_number),
        )
        for episode in flat
    ]

    return [
        serializer.season(
            raw,
            show_id=show_id,
            season_id=season_id,
            episodes=[episode for episode in mapped_episodes if episode.season_id == season_id],
        )
        for season_id, raw in seasons_to_map
    ]
