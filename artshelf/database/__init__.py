# artshelf/database/__init__.py

"""
Database package for the Art Shelf gallery.

Key Components:
    - Database: Engine and session management
    - Repositories: Query helpers for artworks, artists, tags and series
    - Models: SQLAlchemy models (Artist, Artwork, Image, Tag, Series)

Example:
    from artshelf.database import Database, ArtworkRepository

    db = Database(settings.get_database_url())
    db.create_tables()

    with db.get_session() as session:
        repo = ArtworkRepository(session)
        artwork = repo.get_artwork(42)
"""
from .database import Database
from .models import Base, Artist, Artwork, ArtworkTag, Image, Series, SeriesArtwork, Tag
from .repository import ArtistRepository, ArtworkRepository, SeriesRepository, TagRepository

__all__ = [
    'Database', 'Base',
    'Artist', 'Artwork', 'ArtworkTag', 'Image', 'Series', 'SeriesArtwork', 'Tag',
    'ArtistRepository', 'ArtworkRepository', 'SeriesRepository', 'TagRepository',
]
