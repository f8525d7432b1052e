"""Tests for artshelf.services.query_builder: listing SQL assembly.

Tests cover:
- Placeholder numbering and the order filters consume slots in.
- Each filter's SQL fragment and bound value.
- The ORDER BY allow-list and its fallback.
- COUNT/SELECT sharing one leading parameter set.
"""

from __future__ import annotations

from datetime import date

import pytest

from artshelf.media import VIDEO_EXTENSIONS
from artshelf.schemas import ArtworksQuery
from artshelf.services.query_builder import (
    build_artwork_where_clause,
    build_count_sql,
    build_select_sql,
    map_sort_option_to_sql,
)


class TestWhereClause:
    def test_no_filters(self):
        where = build_artwork_where_clause(ArtworksQuery())
        assert where.sql == "WHERE 1=1"
        assert where.params == {}
        assert where.next_index == 1

    def test_initial_index_must_be_positive(self):
        with pytest.raises(ValueError):
            build_artwork_where_clause(ArtworksQuery(), initial_index=0)

    def test_initial_index_offsets_placeholders(self):
        where = build_artwork_where_clause(ArtworksQuery(artist_id=3), initial_index=5)
        assert "a.artist_id = :p5" in where.sql
        assert where.params == {"p5": 3}
        assert where.next_index == 6

    def test_filters_consume_slots_in_order(self):
        query = ArtworksQuery(
            external_id="123",
            artist_id=7,
            tags="a,b",
            tag_id=4,
            search="sky",
            media_type="video",
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 31),
            media_count_min=1,
            media_count_max=9,
        )
        where = build_artwork_where_clause(query)

        ext_count = len(VIDEO_EXTENSIONS)
        assert where.params["p1"] == "123"
        assert where.params["p2"] == 7
        assert (where.params["p3"], where.params["p4"]) == ("a", "b")
        assert where.params["p5"] == 4
        assert where.params["p6"] == "%sky%"
        video_slots = [where.params[f"p{i}"] for i in range(7, 7 + ext_count)]
        assert video_slots == [f"%{ext}" for ext in VIDEO_EXTENSIONS]
        after_video = 7 + ext_count
        assert where.params[f"p{after_video}"] == "2024-01-01"
        assert where.params[f"p{after_video + 1}"] == "2024-02-01"
        assert where.params[f"p{after_video + 2}"] == 1
        assert where.params[f"p{after_video + 3}"] == 9
        assert where.next_index == after_video + 4
        assert len(where.params) == where.next_index - 1

    def test_artist_name_substring(self):
        where = build_artwork_where_clause(ArtworksQuery(artist_name="ali"))
        assert "LOWER(artist.name) LIKE LOWER(:p1)" in where.sql
        assert where.params == {"p1": "%ali%"}

    def test_artist_name_exact(self):
        where = build_artwork_where_clause(ArtworksQuery(artist_name="Alice", exact_match=True))
        assert "artist.name = :p1" in where.sql
        assert where.params == {"p1": "Alice"}

    def test_tags_one_placeholder_per_name(self):
        where = build_artwork_where_clause(ArtworksQuery(tags=["x", "y", "z"]))
        assert "t2.name IN (:p1, :p2, :p3)" in where.sql

    def test_search_shares_one_placeholder(self):
        where = build_artwork_where_clause(ArtworksQuery(search="moon"))
        assert where.sql.count(":p1") == 3
        assert where.next_index == 2

    def test_search_exact_matches_title(self):
        where = build_artwork_where_clause(ArtworksQuery(search="Moon", exact_match=True))
        assert "a.title = :p1" in where.sql
        assert where.params == {"p1": "Moon"}

    def test_image_filter_negates_video_check(self):
        where = build_artwork_where_clause(ArtworksQuery(media_type="image"))
        assert "NOT EXISTS (SELECT 1 FROM images i" in where.sql
        assert len(where.params) == len(VIDEO_EXTENSIONS)

    def test_all_media_adds_nothing(self):
        where = build_artwork_where_clause(ArtworksQuery(media_type="all"))
        assert where.sql == "WHERE 1=1"

    def test_user_input_is_never_inlined(self):
        hostile = "x'; DROP TABLE artworks; --"
        where = build_artwork_where_clause(ArtworksQuery(search=hostile, artist_name=hostile))
        assert "DROP TABLE" not in where.sql


class TestSortMapping:
    @pytest.mark.parametrize(
        "sort_by, expected",
        [
            ("title_asc", "ORDER BY a.title ASC"),
            ("artist_desc", "ORDER BY artist.name DESC"),
            ("images_asc", "ORDER BY a.image_count ASC"),
            ("source_date_asc", "ORDER BY a.source_date ASC"),
        ],
    )
    def test_known_keys(self, sort_by, expected):
        assert map_sort_option_to_sql(sort_by) == f"{expected}, a.id DESC"

    @pytest.mark.parametrize("sort_by", [None, "", "id; DROP TABLE artworks", "newest"])
    def test_unknown_keys_fall_back_to_newest(self, sort_by):
        assert map_sort_option_to_sql(sort_by) == "ORDER BY a.source_date DESC, a.id DESC"


class TestStatements:
    def test_count_and_select_share_leading_params(self):
        where = build_artwork_where_clause(ArtworksQuery(artist_id=2, search="sky"))
        count_sql, count_params = build_count_sql(where)
        select_sql, select_params = build_select_sql(where, map_sort_option_to_sql(None), 24, 48)

        assert count_sql.startswith("SELECT COUNT(*)")
        assert {k: select_params[k] for k in count_params} == count_params
        assert select_params["p3"] == 24
        assert select_params["p4"] == 48
        assert select_sql.rstrip().endswith("LIMIT :p3 OFFSET :p4")

    def test_select_leaves_where_untouched(self):
        where = build_artwork_where_clause(ArtworksQuery(artist_id=2))
        build_select_sql(where, map_sort_option_to_sql(None), 10, 0)
        assert where.params == {"p1": 2}
        assert where.next_index == 2

    def test_select_joins_artist(self):
        where = build_artwork_where_clause(ArtworksQuery())
        select_sql, _ = build_select_sql(where, map_sort_option_to_sql(None), 10, 0)
        assert "LEFT JOIN artists artist ON a.artist_id = artist.id" in select_sql
        assert "artist.name AS artist_name" in select_sql
