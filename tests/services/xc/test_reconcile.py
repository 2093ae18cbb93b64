from datetime import UTC, datetime

import pytest

from tests.test_utils.xc import raw_episode, raw_season, raw_show_detail
from xcnorm.core.config import NormaliseConf
from xcnorm.services.xc import StandardSerializer
from xcnorm.services.xc.exceptions import MissingIdentifierError, XCNormaliseError
from xcnorm.services.xc.reconcile import (
    EpisodeGroup,
    build_season_index,
    group_episodes,
    numeric_season,
    season_key,
    synthesise_season,
)


def test_season_key() -> None:
    assert season_key(1) == "1"
    assert season_key(1.0) == "1"
    assert season_key("01") == "1"
    assert season_key(" 2 ") == "2"
    assert season_key("Specials") == "Specials"
    assert season_key(None) is None
    assert season_key("") is None


def test_numeric_season() -> None:
    assert numeric_season("3") == "3"
    assert numeric_season("Specials") is None


def test_group_episodes_dict() -> None:
    groups = group_episodes({"1": [raw_episode(1)], "02": [raw_episode(2, season=2)]})

    assert [group.key for group in groups] == ["1", "2"]
    assert [len(group.episodes) for group in groups] == [1, 1]


def test_group_episodes_merges_equal_keys() -> None:
    groups = group_episodes({"1": [raw_episode(1)], "01": [raw_episode(2, episode_num=2)]})

    assert len(groups) == 1
    assert groups[0].key == "1"
    assert [episode["id"] for episode in groups[0].episodes] == [1, 2]


def test_group_episodes_list_of_lists() -> None:
    groups = group_episodes([[raw_episode(1, season=3)], [{"id": 2}]])

    assert [group.key for group in groups] == ["3", "2"]


def test_group_episodes_flat_list() -> None:
    groups = group_episodes([raw_episode(1, season=2), raw_episode(2, season=1), raw_episode(3, season=2), {"id": 4}])

    assert [(group.key, len(group.episodes)) for group in groups] == [("2", 2), ("1", 2)]


def test_group_episodes_empty() -> None:
    assert group_episodes({}) == []
    assert group_episodes([]) == []
    assert group_episodes(None) == []


def test_group_episodes_bad_shape() -> None:
    with pytest.raises(XCNormaliseError, match="Expected episodes to be an object or a list"):
        group_episodes("episodes")

    with pytest.raises(XCNormaliseError, match="Expected a list of episodes"):
        group_episodes({"1": {"id": 1}})

    with pytest.raises(XCNormaliseError, match="Expected each episode to be an object"):
        group_episodes({"1": ["1"]})


def test_build_season_index_first_wins() -> None:
    index = build_season_index(
        [
            {"id": 10, "seasonNumber": 1},
            {"id": 11, "seasonNumber": "1"},
            {"id": 20, "seasonNumber": 2},
            {"id": None, "seasonNumber": 3},
        ]
    )

    assert index == {"1": "10", "2": "20"}


def test_synthesise_season() -> None:
    group = EpisodeGroup(key="2", episodes=[{"id": 1, "info": {"releaseDate": "2020-01-01", "rating": "7"}}, {"id": 2}])

    season = synthesise_season(group.key, group.episodes, "Season 2")

    assert season["id"] == "2"
    assert season["name"] == "Season 2"
    assert season["episodeCount"] == 2
    assert season["seasonNumber"] == "2"
    assert season["airDate"] == "2020-01-01"
    assert season["voteAverage"] == "7"


# region Show detail
def test_show_matches_episodes_to_seasons(serializer: StandardSerializer) -> None:
    """A season number match gives the episode the real season id."""
    raw = raw_show_detail(
        seasons=[raw_season(5, 1)],
        episodes={"1": [raw_episode(501, season=1)]},
    )

    show = serializer.show(raw)

    assert len(show.seasons) == 1
    (season,) = show.seasons
    assert season.id == "5"
    assert season.number == 1
    assert season.show_id == "77"
    assert [episode.id for episode in season.episodes] == ["501"]
    assert season.episodes[0].season_id == "5"
    assert season.episodes[0].show_id == "77"


def test_show_synthesises_seasons(serializer: StandardSerializer) -> None:
    """No season list, so each episode group becomes a season."""
    raw = raw_show_detail(seasons=[], episodes={"2": [raw_episode(201, season=2)]})

    (season,) = serializer.show(raw).seasons

    assert season.id == "2"
    assert season.number == 2
    assert season.episode_count == 1
    assert season.name == "Season 2"
    assert season.cover == "http://pytest.internal/episodes/201.jpg"
    assert season.vote_average == 8.5
    assert season.release_date == datetime(2018, 10, 1, tzinfo=UTC)
    assert season.episodes[0].season_id == "2"


def test_show_season_name_template() -> None:
    serializer = StandardSerializer(NormaliseConf(season_name_template="Series {number}"))
    raw = raw_show_detail(episodes={"3": [raw_episode(301, season=3)]})

    (season,) = serializer.show(raw).seasons

    assert season.name == "Series 3"


def test_show_orphan_episodes_get_a_season(serializer: StandardSerializer) -> None:
    """Episodes in a season the list doesn't have still land in exactly one season."""
    raw = raw_show_detail(
        seasons=[raw_season(5, 1)],
        episodes={
            "1": [raw_episode(101, season=1), raw_episode(102, season=1, episode_num=2)],
            "2": [raw_episode(201, season=2)],
        },
    )

    seasons = serializer.show(raw).seasons

    assert [season.id for season in seasons] == ["5", "2"]
    assert [episode.id for episode in seasons[0].episodes] == ["101", "102"]
    assert [episode.id for episode in seasons[1].episodes] == ["201"]
    assert seasons[1].episode_count == 1

    all_episodes = [episode.id for season in seasons for episode in season.episodes]
    assert sorted(all_episodes) == ["101", "102", "201"]


def test_show_padded_season_keys(serializer: StandardSerializer) -> None:
    """Groups under "1" and "01" give one season, each episode attached once."""
    raw = raw_show_detail(
        episodes={"1": [raw_episode(1)], "01": [raw_episode(2, episode_num=2)]},
    )

    (season,) = serializer.show(raw).seasons

    assert season.id == "1"
    assert season.episode_count == 2
    assert [episode.id for episode in season.episodes] == ["1", "2"]


def test_show_season_type_drift(serializer: StandardSerializer) -> None:
    """Season numbers match across number and string forms."""
    raw = raw_show_detail(
        seasons=[raw_season("9", "1"), raw_season(10, 2.0)],
        episodes={"1": [raw_episode(1, season="1")], "2": [raw_episode(2, season=2)]},
    )

    seasons = serializer.show(raw).seasons

    assert [season.id for season in seasons] == ["9", "10"]
    assert [[episode.id for episode in season.episodes] for season in seasons] == [["1"], ["2"]]


def test_show_episode_without_season_uses_group(serializer: StandardSerializer) -> None:
    episode = raw_episode(1, season=None)
    raw = raw_show_detail(seasons=[raw_season(5, 1)], episodes={"1": [episode]})

    (season,) = serializer.show(raw).seasons

    assert season.episodes[0].season_id == "5"
    assert season.episodes[0].season_number == 1


def test_show_seasons_keyed_by_number(serializer: StandardSerializer) -> None:
    raw = raw_show_detail(episodes={"1": [raw_episode(1)]})
    raw["seasons"] = {"1": raw_season(5, 1)}

    (season,) = serializer.show(raw).seasons

    assert season.id == "5"


def test_show_episode_list_forms(serializer: StandardSerializer) -> None:
    nested = raw_show_detail(episodes=[[raw_episode(1, season=1)], [raw_episode(2, season=2)]])
    flat = raw_show_detail(episodes=[raw_episode(1, season=1), raw_episode(2, season=2)])

    assert serializer.show(nested) == serializer.show(flat)
    assert [season.id for season in serializer.show(flat).seasons] == ["1", "2"]


def test_show_labelled_season(serializer: StandardSerializer) -> None:
    """Panels that key by a label instead of a number get a season with no number."""
    raw = raw_show_detail(episodes={"Specials": [raw_episode(1, season="Specials")]})

    (season,) = serializer.show(raw).seasons

    assert season.id == "Specials"
    assert season.number is None
    assert season.episodes[0].season_number is None


def test_show_without_episodes(serializer: StandardSerializer) -> None:
    show = serializer.show(raw_show_detail(seasons=[raw_season(5, 1)], episodes=[]))

    (season,) = show.seasons
    assert season.episodes == []

    assert serializer.show(raw_show_detail()).seasons == []


def test_show_episode_fields(serializer: StandardSerializer) -> None:
    raw = raw_show_detail(episodes={"1": [raw_episode(501, season=1, episode_num=3)]})

    episode = serializer.show(raw).seasons[0].episodes[0]

    assert episode.number == 3
    assert episode.season_number == 1
    assert episode.title == "Bluey - S1E3"
    assert episode.duration == 420
    assert episode.tmdb_id == "1003"
    assert episode.vote_average == 8.5
    assert episode.video == {"codecName": "h264", "width": 1920, "height": 1080}
    assert episode.bitrate == 3000
    assert episode.container_extension == "mp4"


def test_show_keeps_show_level_fields(serializer: StandardSerializer) -> None:
    show = serializer.show(raw_show_detail(episodes={"1": [raw_episode(1)]}))

    assert show.id == "77"
    assert show.name == "Bluey"
    assert show.duration == 420
    assert show.vote_average == 9.0


def test_show_missing_series_id(serializer: StandardSerializer) -> None:
    raw = raw_show_detail(info={"series_id": None}, episodes={"1": [raw_episode(1)]})

    with pytest.raises(MissingIdentifierError, match="show"):
        serializer.show(raw)


def test_show_series_id_fallback(serializer: StandardSerializer) -> None:
    raw = raw_show_detail(info={"series_id": None}, episodes={"1": [raw_episode(1)]})

    show = serializer.show(raw, series_id=77)

    assert show.id == "77"
    assert show.seasons[0].show_id == "77"


def test_show_missing_episode_id(serializer: StandardSerializer) -> None:
    raw = raw_show_detail(episodes={"1": [raw_episode(None)]})

    with pytest.raises(MissingIdentifierError, match="episode"):
        serializer.show(raw)


def test_show_is_deterministic(serializer: StandardSerializer) -> None:
    raw = raw_show_detail(
        seasons=[raw_season(5, 1)],
        episodes={"1": [raw_episode(1)], "3": [raw_episode(3, season=3)], "2": [raw_episode(2, season=2)]},
    )

    first = serializer.show(raw)
    second = serializer.show(raw)

    assert first == second
    assert [season.id for season in first.seasons] == ["5", "3", "2"]
