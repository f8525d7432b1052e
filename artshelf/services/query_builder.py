"""
SQL assembly for the artwork listing.

The listing runs two statements, a COUNT and a page SELECT, over the same
``WHERE`` clause. Placeholders are named ``:p1``, ``:p2`` ... in the order the
filters are appended, so both statements bind an identical leading parameter
set and the SELECT only adds its LIMIT/OFFSET slots after them.

Nothing the client sends is interpolated into the SQL text: filter values are
always bound, and ORDER BY comes from a fixed allow-list.
"""
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, Iterable, List, Tuple, Union

from ..media import VIDEO_EXTENSIONS
from ..schemas import ArtworksQuery, MediaTypeFilter, SortOption, get_safe_sort_option

SORT_SQL = {
    SortOption.TITLE_ASC: 'ORDER BY a.title ASC',
    SortOption.TITLE_DESC: 'ORDER BY a.title DESC',
    SortOption.ARTIST_ASC: 'ORDER BY artist.name ASC',
    SortOption.ARTIST_DESC: 'ORDER BY artist.name DESC',
    SortOption.IMAGES_ASC: 'ORDER BY a.image_count ASC',
    SortOption.IMAGES_DESC: 'ORDER BY a.image_count DESC',
    SortOption.SOURCE_DATE_ASC: 'ORDER BY a.source_date ASC',
    SortOption.SOURCE_DATE_DESC: 'ORDER BY a.source_date DESC',
}

# Keeps pages stable when the sort key ties
TIEBREAKER_SQL = 'a.id DESC'

FROM_SQL = """
    FROM artworks a
    LEFT JOIN artists artist ON a.artist_id = artist.id"""

SELECT_COLUMNS_SQL = """
    SELECT
      a.id,
      a.title,
      a.description,
      a.description_length,
      a.external_id,
      a.source_url,
      a.source_date,
      a.image_count,
      a.series_id,
      a.created_at,
      a.updated_at,
      artist.id AS artist_id,
      artist.name AS artist_name,
      artist.username AS artist_username,
      artist.user_id AS artist_user_id,
      artist.bio AS artist_bio,
      artist.avatar AS artist_avatar,
      artist.created_at AS artist_created_at,
      artist.updated_at AS artist_updated_at"""


@dataclass
class WhereClause:
    '''A WHERE clause under construction plus its positional bookkeeping'''
    sql: str = 'WHERE 1=1'
    params: Dict[str, Any] = field(default_factory=dict)
    next_index: int = 1

    def bind(self, value: Any) -> str:
        """Register a value in the next slot and return its placeholder"""
        name = f'p{self.next_index}'
        self.params[name] = value
        self.next_index += 1
        return f':{name}'

    def bind_many(self, values: Iterable[Any]) -> List[str]:
        return [self.bind(value) for value in values]

    def add(self, condition: str) -> None:
        self.sql += f' AND {condition}'


def _video_exists_sql(where: WhereClause) -> str:
    placeholders = where.bind_many(f'%{ext}' for ext in VIDEO_EXTENSIONS)
    like_conditions = ' OR '.join(f'LOWER(i.path) LIKE {p}' for p in placeholders)
    return (
        'EXISTS (SELECT 1 FROM images i '
        f'WHERE i.artwork_id = a.id AND ({like_conditions}))'
    )


def build_artwork_where_clause(query: ArtworksQuery, initial_index: int = 1) -> WhereClause:
    """
    Build the filtered WHERE clause for the artwork listing.

    Args:
        query: Validated listing parameters
        initial_index: Number of the first placeholder

    Returns:
        WhereClause whose ``next_index`` is the first free slot
    """
    if initial_index < 1:
        raise ValueError(f"Placeholder numbering starts at 1, got {initial_index}")

    where = WhereClause(next_index=initial_index)

    if query.external_id:
        where.add(f'a.external_id = {where.bind(query.external_id)}')

    if query.artist_id is not None:
        where.add(f'a.artist_id = {where.bind(query.artist_id)}')

    if query.artist_name:
        if query.exact_match:
            where.add(f'artist.name = {where.bind(query.artist_name)}')
        else:
            where.add(f"LOWER(artist.name) LIKE LOWER({where.bind(f'%{query.artist_name}%')})")

    if query.tags:
        names = ', '.join(where.bind_many(query.tags))
        where.add(
            'EXISTS (SELECT 1 FROM artwork_tags at2 '
            'JOIN tags t2 ON at2.tag_id = t2.id '
            f'WHERE at2.artwork_id = a.id AND t2.name IN ({names}))'
        )

    if query.tag_id is not None:
        where.add(
            'EXISTS (SELECT 1 FROM artwork_tags at3 '
            f'WHERE at3.artwork_id = a.id AND at3.tag_id = {where.bind(query.tag_id)})'
        )

    if query.search:
        if query.exact_match:
            where.add(f'a.title = {where.bind(query.search)}')
        else:
            # One slot shared by the three columns
            p = where.bind(f'%{query.search}%')
            where.add(
                f'(LOWER(a.title) LIKE LOWER({p}) OR '
                f'LOWER(a.description) LIKE LOWER({p}) OR '
                f'LOWER(artist.name) LIKE LOWER({p}))'
            )

    if query.media_type == MediaTypeFilter.VIDEO:
        where.add(_video_exists_sql(where))
    elif query.media_type == MediaTypeFilter.IMAGE:
        where.add(f'NOT {_video_exists_sql(where)}')

    if query.start_date:
        where.add(f'a.source_date >= {where.bind(query.start_date.isoformat())}')

    if query.end_date:
        # Inclusive end day
        day_after = query.end_date + timedelta(days=1)
        where.add(f'a.source_date < {where.bind(day_after.isoformat())}')

    if query.media_count_min is not None:
        where.add(f'a.image_count >= {where.bind(query.media_count_min)}')

    if query.media_count_max is not None:
        where.add(f'a.image_count <= {where.bind(query.media_count_max)}')

    return where


def map_sort_option_to_sql(sort_by: Union[SortOption, str, None]) -> str:
    '''ORDER BY clause for an allow-listed sort key; unknown keys sort newest first'''
    order_by = SORT_SQL[get_safe_sort_option(sort_by)]
    return f'{order_by}, {TIEBREAKER_SQL}'


def build_count_sql(where: WhereClause) -> Tuple[str, Dict[str, Any]]:
    sql = f"SELECT COUNT(*) AS count{FROM_SQL}\n    {where.sql}"
    return sql, dict(where.params)


def build_select_sql(where: WhereClause, order_by: str, limit: int, offset: int) -> Tuple[str, Dict[str, Any]]:
    """
    Page SELECT sharing the count's parameters.

    LIMIT and OFFSET take the two slots after the filters; ``where`` itself is
    left untouched so it can still be reused for the COUNT.
    """
    limit_name = f'p{where.next_index}'
    offset_name = f'p{where.next_index + 1}'
    sql = (
        f"{SELECT_COLUMNS_SQL}{FROM_SQL}\n    {where.sql}\n    {order_by}\n"
        f"    LIMIT :{limit_name} OFFSET :{offset_name}"
    )
    params = dict(where.params)
    params[limit_name] = limit
    params[offset_name] = offset
    return sql, params
