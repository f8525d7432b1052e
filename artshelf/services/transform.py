"""
Row to DTO shaping for artworks and their media.

An APNG that shares its file stem with a video of the same artwork is the
video's animated preview: it is attached to the video as ``raw`` and hidden
from the visible list, so the pair renders as one video item.
"""
import posixpath
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..media import MediaType, get_stem, is_apng_file, is_video_file
from ..schemas import ArtistResponse, ArtworkImage, ArtworkSummary

SOURCE_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

ARTIST_COLUMNS = ('name', 'username', 'user_id', 'bio', 'avatar', 'created_at', 'updated_at')


@dataclass
class MediaSummary:
    images: List[ArtworkImage] = field(default_factory=list)
    has_video: bool = False
    video_count: int = 0
    image_count: int = 0
    total_media_size: int = 0


def coerce_datetime(value: Any) -> Optional[datetime]:
    """
    Normalize a timestamp column value.

    Raw SQL on SQLite returns DateTime columns as text, while ORM loads and
    PostgreSQL return ``datetime`` objects.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def format_source_date(value: Any) -> Optional[str]:
    parsed = coerce_datetime(value)
    return parsed.strftime(SOURCE_DATE_FORMAT) if parsed else None


def _to_image_dto(image: Any) -> ArtworkImage:
    item = ArtworkImage.model_validate(image)
    item.media_type = MediaType.VIDEO if is_video_file(item.path) else MediaType.IMAGE
    return item


def transform_images(images: Iterable[Any], db_image_count: Optional[int] = None) -> MediaSummary:
    """
    Convert image rows to DTOs and fold APNG previews into their videos.

    Args:
        images: Image ORM objects or mappings, already in display order
        db_image_count: Stored image count; used as ``image_count`` when the
            artwork has no video. Defaults to the number of visible items.

    Returns:
        MediaSummary with the visible items and aggregates computed over them
    """
    all_items = [_to_image_dto(image) for image in images]

    visible: List[ArtworkImage] = []
    for item in all_items:
        if is_apng_file(item.path):
            stem = get_stem(item.path)
            owner = next(
                (other for other in all_items
                 if other is not item
                 and other.media_type == MediaType.VIDEO
                 and get_stem(other.path) == stem),
                None
            )
            if owner is not None:
                owner.raw = item
                continue
        visible.append(item)

    video_count = sum(1 for item in visible if item.media_type == MediaType.VIDEO)
    has_video = video_count > 0
    if has_video:
        image_count = 0
    else:
        image_count = db_image_count if db_image_count is not None else len(visible)

    return MediaSummary(
        images=visible,
        has_video=has_video,
        video_count=video_count,
        image_count=image_count,
        total_media_size=sum(item.size or 0 for item in visible),
    )


def first_image_dir(images: Sequence[ArtworkImage]) -> Optional[str]:
    '''Directory of the first visible media item'''
    return posixpath.dirname(images[0].path) if images else None


def artwork_to_row(artwork) -> Dict[str, Any]:
    '''Flatten an Artwork ORM object into the column layout of the listing SELECT'''
    row = {
        'id': artwork.id,
        'title': artwork.title,
        'description': artwork.description,
        'description_length': artwork.description_length,
        'external_id': artwork.external_id,
        'source_url': artwork.source_url,
        'source_date': artwork.source_date,
        'image_count': artwork.image_count,
        'series_id': artwork.series_id,
        'created_at': artwork.created_at,
        'updated_at': artwork.updated_at,
        'artist_id': None,
    }
    artist = artwork.artist
    if artist is not None:
        row['artist_id'] = artist.id
        for column in ARTIST_COLUMNS:
            row[f'artist_{column}'] = getattr(artist, column)
    return row


def _artist_from_row(row: Mapping[str, Any]) -> Optional[ArtistResponse]:
    if row.get('artist_id') is None:
        return None
    return ArtistResponse(
        id=row['artist_id'],
        name=row.get('artist_name') or '',
        username=row.get('artist_username'),
        user_id=row.get('artist_user_id'),
        bio=row.get('artist_bio'),
        avatar=row.get('artist_avatar'),
        # Not known in list context
        artworks_count=0,
        created_at=coerce_datetime(row.get('artist_created_at')),
        updated_at=coerce_datetime(row.get('artist_updated_at')),
    )


def transform_single_artwork(
    row: Mapping[str, Any],
    images: Iterable[Any],
    tag_names: Sequence[str],
    db_image_count: Optional[int] = None,
) -> ArtworkSummary:
    """
    Build the list DTO for one artwork.

    Args:
        row: Flattened artwork columns with ``artist_*`` keys
        images: The artwork's image rows in display order
        tag_names: Tag names to expose
        db_image_count: Overrides ``row['image_count']`` as the stored count
    """
    stored_count = db_image_count if db_image_count is not None else row.get('image_count')
    media = transform_images(images, stored_count)
    description = row.get('description')

    return ArtworkSummary(
        id=row['id'],
        title=row.get('title') or '',
        description=description,
        description_length=row.get('description_length') or len(description or ''),
        external_id=row.get('external_id'),
        source_url=row.get('source_url'),
        source_date=format_source_date(row.get('source_date')),
        series_id=row.get('series_id'),
        artist=_artist_from_row(row),
        images=media.images,
        first_image_path=first_image_dir(media.images),
        tags=list(tag_names),
        image_count=media.image_count,
        video_count=media.video_count,
        is_video=media.has_video,
        total_media_size=media.total_media_size,
        created_at=coerce_datetime(row.get('created_at')),
        updated_at=coerce_datetime(row.get('updated_at')),
    )
