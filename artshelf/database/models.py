from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Index
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

class Artist(Base):
    __tablename__ = 'artists'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    username = Column(String(255))
    user_id = Column(String(50), index=True)  # Id on the source site
    bio = Column(Text)
    avatar = Column(String(1000))

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    artworks = relationship("Artwork", back_populates="artist")

class Artwork(Base):
    __tablename__ = 'artworks'

    id = Column(Integer, primary_key=True)
    artist_id = Column(Integer, ForeignKey('artists.id', ondelete='SET NULL'), index=True)
    series_id = Column(Integer, ForeignKey('series.id', ondelete='SET NULL'), index=True)

    # Basic Info
    title = Column(String(500), nullable=False)
    description = Column(Text)
    description_length = Column(Integer, default=0)

    # Source
    external_id = Column(String(100), index=True)
    source_url = Column(String(1000))
    source_date = Column(DateTime, index=True)

    # Counters, refreshed by ArtworkRepository.refresh_counters
    image_count = Column(Integer, default=0, nullable=False)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    artist = relationship("Artist", back_populates="artworks")
    images = relationship(
        "Image",
        back_populates="artwork",
        order_by=lambda: (Image.sort_order, Image.id),
        cascade="all, delete-orphan"
    )
    tags = relationship("Tag", secondary="artwork_tags", back_populates="artworks", order_by="Tag.name")
    series = relationship("Series", back_populates="artworks")

    __table_args__ = (
        Index('ix_artworks_title_description', 'title', 'description'),
    )

class Image(Base):
    __tablename__ = 'images'

    id = Column(Integer, primary_key=True)
    artwork_id = Column(Integer, ForeignKey('artworks.id', ondelete='CASCADE'), index=True)
    path = Column(String(1000), nullable=False)  # Relative to the scan root
    width = Column(Integer)
    height = Column(Integer)
    size = Column(Integer)  # Bytes
    sort_order = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    artwork = relationship("Artwork", back_populates="images")

class Tag(Base):
    __tablename__ = 'tags'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    name_zh = Column(String(255))
    artwork_count = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    artworks = relationship("Artwork", secondary="artwork_tags", back_populates="tags")

    __table_args__ = (
        Index('ix_tags_artwork_count_name', 'artwork_count', 'name'),
    )

class ArtworkTag(Base):
    __tablename__ = 'artwork_tags'

    artwork_id = Column(Integer, ForeignKey('artworks.id', ondelete='CASCADE'), primary_key=True)
    tag_id = Column(Integer, ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True, index=True)

class Series(Base):
    __tablename__ = 'series'

    id = Column(Integer, primary_key=True)
    title = Column(String(500), nullable=False)
    description = Column(Text)
    cover_image_url = Column(String(1000))

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    artworks = relationship("Artwork", back_populates="series")
    series_artworks = relationship(
        "SeriesArtwork",
        back_populates="series",
        order_by="[SeriesArtwork.sort_order, SeriesArtwork.artwork_id]",
        cascade="all, delete-orphan"
    )

class SeriesArtwork(Base):
    __tablename__ = 'series_artworks'

    series_id = Column(Integer, ForeignKey('series.id', ondelete='CASCADE'), primary_key=True)
    artwork_id = Column(Integer, ForeignKey('artworks.id', ondelete='CASCADE'), primary_key=True, index=True)
    sort_order = Column(Integer, nullable=False)

    series = relationship("Series", back_populates="series_artworks")
    artwork = relationship("Artwork")
