import logging
from typing import List

import pandas as pd
from sqlalchemy import func, select

from ..database import Database
from ..database.models import Artist, Artwork, Image, Tag
from ..database.repository import ArtistRepository, TagRepository
from ..media import format_file_size, get_media_type
from ..schemas import GalleryStats, MediaBreakdown, RankedItem

logger = logging.getLogger("artshelf.services.stats")

TOP_LIMIT = 20
OTHER_MEDIA = 'other'


def _media_label(path: str) -> str:
    media_type = get_media_type(path)
    return media_type.value if media_type else OTHER_MEDIA


def media_breakdown(df: pd.DataFrame) -> List[MediaBreakdown]:
    """
    Files and bytes per media type.

    Args:
        df: DataFrame with ``path`` and ``size`` columns, one row per image
    """
    if df.empty:
        return []

    df = df.copy()
    df['size'] = df['size'].fillna(0).astype('int64')
    df['media_type'] = df['path'].map(_media_label)
    grouped = (
        df.groupby('media_type')
        .agg(files=('path', 'count'), total_size=('size', 'sum'))
        .sort_index()
    )
    return [
        MediaBreakdown(
            media_type=media_type,
            files=int(row.files),
            total_size=int(row.total_size),
            display_size=format_file_size(int(row.total_size)),
        )
        for media_type, row in grouped.iterrows()
    ]


class StatsService:
    def __init__(self, db: Database):
        self.db = db

    def get_stats(self) -> GalleryStats:
        with self.db.get_session() as session:
            counts = {
                'artworks': session.query(func.count(Artwork.id)).scalar() or 0,
                'artists': session.query(func.count(Artist.id)).scalar() or 0,
                'images': session.query(func.count(Image.id)).scalar() or 0,
                'tags': session.query(func.count(Tag.id)).scalar() or 0,
            }
            top_artists = [
                RankedItem(id=artist_id, name=name, count=count)
                for artist_id, name, count in ArtistRepository(session).top_by_artworks(TOP_LIMIT)
            ]
            top_tags = [
                RankedItem(id=tag.id, name=tag.name, count=tag.artwork_count)
                for tag in TagRepository(session).popular(TOP_LIMIT)
            ]
            media_df = pd.read_sql(select(Image.path, Image.size), session.connection())

        logger.query(f"Stats computed over {len(media_df)} media files")
        return GalleryStats(
            **counts,
            top_artists=top_artists,
            top_tags=top_tags,
            media=media_breakdown(media_df),
        )
