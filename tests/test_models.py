"""
Tests for catalog data structures and the pure filtering/paging helpers.
"""

import pytest

from dex_browser.utils.core.errors import DecodeError
from dex_browser.utils.data.constants import PLACEHOLDER_IMAGE_URL
from dex_browser.utils.data.models import (
    ActiveFilters,
    Generation,
    IndexEntry,
    ListPage,
    PageResult,
    Pokemon,
    QueryState,
    RawNamedResource,
    StatRange,
)
from dex_browser.utils.data.pokemon import (
    filter_pokemon,
    matches_filters,
    page_id_range,
    paginate,
    resolve_id_universe,
)
from dex_browser.utils.text.text_util import format_display_name, name_to_id, stat_key
from fakes import make_payload


class TestPokemon:
    """Building Pokemon from per-entity payloads."""

    def test_from_payload(self):
        payload = make_payload(6, "charizard", ("fire", "flying"), hp=78, height=17, weight=905)
        pokemon = Pokemon.from_payload(payload)

        assert pokemon.id == 6
        assert pokemon.name == "charizard"
        assert pokemon.types == ("fire", "flying")
        assert pokemon.height == pytest.approx(1.7)
        assert pokemon.weight == pytest.approx(90.5)
        assert pokemon.image_url == "https://img.test/artwork/6.png"
        assert pokemon.stat_value("hp") == 78
        assert pokemon.stat_value("special_attack") == 40
        assert pokemon.stat_value("speed") is None

    def test_types_are_ordered_by_slot(self):
        payload = make_payload(6, "charizard", ("fire", "flying"))
        payload["types"].reverse()
        assert Pokemon.from_payload(payload).types == ("fire", "flying")

    def test_stat_display_fields(self):
        pokemon = Pokemon.from_payload(make_payload(1, "bulbasaur", hp=250))
        hp = pokemon.stats["hp"]
        assert hp.display_name == "HP"
        assert hp.percentage == 100
        assert pokemon.stats["special_attack"].display_name == "Special Attack"
        assert pokemon.stats["special_attack"].percentage == pytest.approx(20.0)

    def test_image_falls_back_to_front_sprite(self):
        pokemon = Pokemon.from_payload(make_payload(1, "bulbasaur", artwork=None))
        assert pokemon.image_url == "https://img.test/front/1.png"

    def test_image_falls_back_to_placeholder(self):
        payload = make_payload(1, "bulbasaur")
        payload["sprites"] = None
        assert Pokemon.from_payload(payload).image_url == PLACEHOLDER_IMAGE_URL

    def test_optional_sections_may_be_missing(self):
        pokemon = Pokemon.from_payload({"id": 132, "name": "ditto"})
        assert pokemon.types == ()
        assert pokemon.primary_type == "normal"
        assert pokemon.height == 0
        assert pokemon.image_url == PLACEHOLDER_IMAGE_URL

    def test_display_helpers(self):
        pokemon = Pokemon.from_payload(make_payload(122, "mr-mime", ("psychic", "fairy")))
        assert pokemon.display_name == "Mr. Mime"
        assert pokemon.primary_type == "psychic"
        assert len(pokemon.type_colors) == 2
        assert pokemon.generation is Generation.I

    def test_matches_search(self):
        pokemon = Pokemon.from_payload(make_payload(25, "pikachu", ("electric",)))
        assert pokemon.matches_search("")
        assert pokemon.matches_search("PIKA")
        assert pokemon.matches_search("elec")
        assert not pokemon.matches_search("char")

    def test_equality_and_hash_follow_id(self):
        first = Pokemon.from_payload(make_payload(25, "pikachu"))
        second = Pokemon.from_payload(make_payload(25, "pikachu"))
        assert first == second
        assert len({first, second}) == 1

    def test_to_dict(self):
        data = Pokemon.from_payload(make_payload(25, "pikachu", ("electric",))).to_dict()
        assert data["id"] == 25
        assert data["types"] == ["electric"]
        assert data["stats"]["hp"]["value"] == 50

    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "missing-id"},
            {"id": 0, "name": "zero"},
            {"id": 5, "name": "   "},
            {"id": "5", "name": "string-id"},
            {"id": 5, "name": "bad-types", "types": "fire"},
        ],
    )
    def test_malformed_payloads(self, payload):
        with pytest.raises(DecodeError):
            Pokemon.from_payload(payload)

    def test_non_object_payload(self):
        with pytest.raises(DecodeError):
            Pokemon.from_payload([1, 2, 3])


class TestListPage:
    def test_from_payload_extracts_ids(self):
        page = ListPage.from_payload(
            {
                "count": 1302,
                "results": [
                    {"name": "bulbasaur", "url": "https://pokeapi.test/api/v2/pokemon/1/"},
                    {"name": "Ivysaur", "url": "https://pokeapi.test/api/v2/pokemon/2"},
                ],
            }
        )
        assert page.count == 1302
        assert [e.id for e in page.results] == [1, 2]
        assert page.results[1].name == "ivysaur"

    def test_entry_without_id_uses_name(self):
        entry = IndexEntry.from_resource(RawNamedResource(name="mew", url=""))
        assert entry.id is None
        assert entry.identifier == "mew"

    def test_negative_count_is_rejected(self):
        with pytest.raises(DecodeError):
            ListPage.from_payload({"count": -1, "results": []})


class TestGeneration:
    def test_contains(self):
        assert Generation.I.contains(151)
        assert not Generation.I.contains(152)
        assert Generation.IX.id_range == (906, 1025)

    @pytest.mark.parametrize(
        "value, expected",
        [(None, None), ("", None), (2, Generation.II), ("3", Generation.III), (Generation.IX, Generation.IX)],
    )
    def test_parse(self, value, expected):
        assert Generation.parse(value) is expected

    @pytest.mark.parametrize("value", [0, 10, "ten"])
    def test_parse_unknown(self, value):
        with pytest.raises(ValueError):
            Generation.parse(value)


class TestFilters:
    """ActiveFilters activeness and clause evaluation."""

    @pytest.fixture
    def roster(self):
        return [
            Pokemon.from_payload(make_payload(4, "charmander", ("fire",), hp=39)),
            Pokemon.from_payload(make_payload(7, "squirtle", ("water",), hp=44)),
            Pokemon.from_payload(make_payload(6, "charizard", ("fire", "flying"), hp=78)),
        ]

    def test_default_filters_are_inactive(self):
        assert not ActiveFilters().is_active

    def test_narrowed_stat_range_is_active(self):
        filters = ActiveFilters(stat_ranges={"hp": StatRange(50, 255)})
        assert filters.is_active
        assert list(filters.narrowed_stats) == ["hp"]

    def test_type_filter_is_any_of(self, roster):
        filters = ActiveFilters(types=frozenset({"fire"}))
        assert [p.name for p in filter_pokemon(roster, filters)] == ["charmander", "charizard"]

    def test_generation_clause(self, roster):
        filters = ActiveFilters(generation=Generation.II)
        assert filter_pokemon(roster, filters) == []

    def test_stat_range_bounds_are_inclusive(self, roster):
        filters = ActiveFilters(stat_ranges={"hp": StatRange(39, 44)})
        assert [p.id for p in filter_pokemon(roster, filters)] == [4, 7]

    def test_missing_stat_does_not_exclude(self):
        pokemon = Pokemon.from_payload({"id": 132, "name": "ditto"})
        assert matches_filters(pokemon, ActiveFilters(stat_ranges={"hp": StatRange(100, 200)}))

    def test_clauses_combine_with_and(self, roster):
        filters = ActiveFilters(types=frozenset({"fire"}), stat_ranges={"hp": StatRange(50, 255)})
        assert [p.id for p in filter_pokemon(roster, filters)] == [6]


class TestPaging:
    def test_page_result_clamps_page(self):
        result = PageResult.build((), 10, 9, 4)
        assert result.page == 3
        assert result.total_pages == 3

    def test_empty_result_has_one_page(self):
        result = PageResult.empty()
        assert result.total_pages == 1
        assert result.is_no_results

    def test_empty_page_of_nonempty_catalog_is_not_no_results(self):
        assert not PageResult.empty(total_count=10, page=5, page_size=4).is_no_results

    def test_paginate(self):
        items, page, total_pages = paginate(list(range(10)), 3, 4)
        assert list(items) == [8, 9]
        assert (page, total_pages) == (3, 3)

    def test_paginate_clamps(self):
        items, page, _ = paginate(list(range(10)), 99, 4)
        assert page == 3
        assert list(items) == [8, 9]

    def test_page_id_range(self):
        assert list(page_id_range(2, 50, 125)) == list(range(51, 101))
        assert list(page_id_range(3, 50, 125)) == list(range(101, 126))
        assert list(page_id_range(4, 50, 125)) == []

    def test_resolve_id_universe(self):
        assert resolve_id_universe(10) == range(1, 11)
        assert resolve_id_universe(1025, Generation.II) == range(152, 252)
        assert resolve_id_universe(100, Generation.II) == range(152, 101)
        assert len(resolve_id_universe(100, Generation.II)) == 0


class TestQueryState:
    """Strategy precedence: search > filters > plain page."""

    def test_plain_page(self):
        assert QueryState().strategy == "page"

    def test_whitespace_query_is_not_a_search(self):
        assert QueryState(search_query="   ").strategy == "page"

    def test_filters(self):
        assert QueryState(filters=ActiveFilters(types=frozenset({"fire"}))).strategy == "filter"

    def test_search_wins_over_filters(self):
        state = QueryState(search_query="pika", filters=ActiveFilters(types=frozenset({"fire"})))
        assert state.strategy == "search"


class TestTextUtil:
    def test_name_to_id(self):
        assert name_to_id("Mr. Mime") == "mr-mime"
        assert name_to_id("Flabébé") == "flabebe"

    def test_format_display_name(self):
        assert format_display_name("special-attack") == "Special Attack"
        assert format_display_name("hp") == "HP"

    def test_stat_key(self):
        assert stat_key("special-defense") == "special_defense"
