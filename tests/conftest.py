"""Shared pytest fixtures for Art Shelf tests.

The gallery fixture is a small SQLite file (not ``:memory:``) because the
listing loads images and tags from worker threads, each on its own
connection.

Seeded rows::

    id  title            artist  source_date  media                         tags
    1   Morning Field    Alice   2024-01-10   2 jpg                         landscape
    2   Evening Sky      Alice   2024-02-05   apng + webm, same stem        landscape, animation
    3   Portrait of Bob  Bob     2024-03-01   1 png                         portrait
    4   Loop             Bob     2023-12-25   apng only                     animation
    5   Clip             Alice   2024-02-20   mp4 + jpg                     -
    6   Undated          -       -            -                             -

Series 1 "Seasons" holds artworks 1 then 2. Carol (artist 3) has no artworks.
"""

from datetime import datetime
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from artshelf.api import create_app
from artshelf.database import (
    Artist, Artwork, ArtworkRepository, Database, Image, Series, SeriesArtwork, Tag,
)


def seed_gallery(db: Database) -> None:
    """Insert the fixture rows documented in the module docstring."""
    with db.get_session() as session:
        alice = Artist(id=1, name="Alice", username="alice", user_id="101", bio="Paints fields")
        bob = Artist(id=2, name="Bob", username="bobby", user_id="102")
        carol = Artist(id=3, name="Carol", username="carol", user_id="103")

        landscape = Tag(id=1, name="landscape", name_zh="风景")
        portrait = Tag(id=2, name="portrait", name_zh="肖像")
        animation = Tag(id=3, name="animation", name_zh="动画")

        seasons = Series(id=1, title="Seasons", description="Through the year")

        artworks = [
            Artwork(
                id=1, title="Morning Field", description="Mist over the meadow",
                artist=alice, source_date=datetime(2024, 1, 10, 8, 30), external_id="9001",
                series=seasons, tags=[landscape],
                images=[
                    Image(id=1, path="alice/1/1_p0.jpg", size=100, width=800, height=600, sort_order=0),
                    Image(id=2, path="alice/1/1_p1.jpg", size=150, width=800, height=600, sort_order=1),
                ],
            ),
            Artwork(
                id=2, title="Evening Sky", description="Clouds in motion",
                artist=alice, source_date=datetime(2024, 2, 5, 19, 0), external_id="9002",
                series=seasons, tags=[landscape, animation],
                images=[
                    Image(id=3, path="alice/2/2_ugoira.apng", size=500, sort_order=0),
                    Image(id=4, path="alice/2/2_ugoira.webm", size=300, sort_order=1),
                ],
            ),
            Artwork(
                id=3, title="Portrait of Bob", description="A quiet self study",
                artist=bob, source_date=datetime(2024, 3, 1, 12, 0), external_id="9003",
                tags=[portrait],
                images=[Image(id=5, path="bob/3/3_p0.png", size=400, sort_order=0)],
            ),
            Artwork(
                id=4, title="Loop", description="Pixel walk cycle",
                artist=bob, source_date=datetime(2023, 12, 25, 9, 15), external_id="9004",
                tags=[animation],
                images=[Image(id=6, path="bob/4/4_ugoira.apng", size=250, sort_order=0)],
            ),
            Artwork(
                id=5, title="Clip", description="Short film",
                artist=alice, source_date=datetime(2024, 2, 20, 22, 10), external_id="9005",
                images=[
                    Image(id=7, path="alice/5/5_clip.mp4", size=1000, sort_order=0),
                    Image(id=8, path="alice/5/5_p0.jpg", size=200, sort_order=1),
                ],
            ),
            Artwork(id=6, title="Undated", description=None),
        ]

        session.add_all([alice, bob, carol, landscape, portrait, animation, seasons])
        session.add_all(artworks)
        session.flush()
        session.add_all([
            SeriesArtwork(series_id=1, artwork_id=1, sort_order=1),
            SeriesArtwork(series_id=1, artwork_id=2, sort_order=2),
        ])
        session.commit()

        ArtworkRepository(session).refresh_counters()


@pytest.fixture(scope="session")
def gallery_db(tmp_path_factory) -> Generator[Database, None, None]:
    """Seeded gallery database shared by read-only tests."""
    db_path: Path = tmp_path_factory.mktemp("gallery") / "gallery.db"
    db = Database(db_path)
    db.create_tables()
    seed_gallery(db)
    try:
        yield db
    finally:
        db.dispose()


@pytest.fixture
def empty_db(tmp_path: Path) -> Generator[Database, None, None]:
    """Schema with no rows."""
    db = Database(tmp_path / "empty.db")
    db.create_tables()
    try:
        yield db
    finally:
        db.dispose()


@pytest.fixture(scope="session")
def test_client(gallery_db: Database) -> TestClient:
    """FastAPI client serving the seeded gallery."""
    return TestClient(create_app(gallery_db))
